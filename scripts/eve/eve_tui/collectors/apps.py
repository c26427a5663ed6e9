"""Application instance status collector."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from eve_tui.collectors.topics import TopicCollector
from eve_tui.messages import AppInstanceStatus, AppsList, decode_app_instance_status
from eve_tui.state import Model


class AppStatusCollector(TopicCollector):
    """One checkpoint file per app instance.

    Changed files are upserted one by one; when a file disappears the whole
    app map is replaced from the files still present.
    """

    def __init__(self, run_dir: Path, pattern: str) -> None:
        super().__init__("apps", run_dir, pattern, decode_app_instance_status, Model.update_app_status)
        self._statuses: dict[Path, AppInstanceStatus] = {}

    def load(self, path: Path) -> Any:
        message = super().load(path)
        if message is not None:
            self._statuses[path] = message
        return message

    def handle_removed(self, model: Model, removed: list[Path]) -> bool:
        for path in removed:
            self._statuses.pop(path, None)
        model.update_app_list(AppsList(apps=tuple(self._statuses.values())))
        return True
