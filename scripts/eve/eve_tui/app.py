"""EVE terminal dashboard entrypoint and main loop."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import termios
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from rich.console import Console
from rich.live import Live

from eve_tui import __version__
from eve_tui.actions import (
    ActionBus,
    ButtonClicked,
    DismissDialog,
    EditInterface,
    InterfaceConfigRequested,
    Notify,
    Quit,
    Redraw,
    UiAction,
    coalesce_redraws,
)
from eve_tui.collectors import env_run_dir
from eve_tui.collectors.topics import build_collectors, collect_once, start_collectors
from eve_tui.events import Event, EventSource, KeyEvent
from eve_tui.logger import setup_logging
from eve_tui.profiles import BUILTIN_PROFILES, MIN_TICK_MS, resolve_profile
from eve_tui.state import Model
from eve_tui.ui.frame import Frame
from eve_tui.ui.ui import Ui, UiTabs

log = logging.getLogger(__name__)


class TerminalError(Exception):
    pass


@contextmanager
def terminal_session(fd: int) -> Iterator[None]:
    """Non-canonical, no-echo input for the lifetime of the block.

    ISIG stays on so Ctrl+C still interrupts.  The original attributes are
    restored however the block exits.
    """
    try:
        old_settings = termios.tcgetattr(fd)
        new = termios.tcgetattr(fd)
        new[3] &= ~(termios.ICANON | termios.ECHO)
        new[6][termios.VMIN] = 0
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSADRAIN, new)
    except termios.error as exc:
        raise TerminalError(f"cannot configure terminal: {exc}") from exc
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


class App:
    def __init__(self, profile: dict, run_dir: Path, console: Console) -> None:
        self.profile = profile
        self.console = console
        self.model = Model()
        self.bus = ActionBus()
        self.ui = Ui(self.bus, debug=profile["debug"], initial_tab=UiTabs.from_name(profile["start_tab"]))
        self.ui.init()
        self.collectors = build_collectors(run_dir, profile.get("topics"))
        self.tick_interval = profile["tick_ms"] / 1000
        self.running = False

    def draw(self) -> Frame:
        width, height = self.console.size
        frame = Frame(self.console, width, height)
        self.ui.render(frame, self.model.snapshot())
        return frame

    def collect_once(self) -> None:
        collect_once(self.collectors, self.model)

    def close(self) -> None:
        for collector in self.collectors:
            close = getattr(collector, "close", None)
            if close is not None:
                close()

    def handle_action(self, action: UiAction) -> None:
        if isinstance(action, Quit):
            log.info("quit requested")
            self.running = False
        elif isinstance(action, EditInterface):
            iface = self.model.snapshot().interface(action.name)
            if iface is None:
                self.ui.notify(f"interface {action.name} is no longer reported")
            else:
                self.ui.show_ip_dialog(iface)
        elif isinstance(action, InterfaceConfigRequested):
            self.ui.pop_layer()
            log.info("configuration requested for %s: %s", action.interface, action.config.describe())
            self.ui.notify(f"{action.interface}: {action.config.describe()} requested")
        elif isinstance(action, Notify):
            self.ui.notify(action.text)
        elif isinstance(action, (DismissDialog, ButtonClicked, Redraw)):
            log.debug("ignoring %r outside the ui", action)
        else:
            raise TypeError(f"unknown action: {action!r}")

    def process(self, event: Event) -> bool:
        """Route one event, then run the actions it queued; True if a frame is due."""
        action = self.ui.handle_event(event)
        if action is not None:
            self.bus.send(action)
        # only what is queued now; actions sent while handling wait a turn
        redraw, actions = coalesce_redraws(self.bus.drain())
        for action in actions:
            self.handle_action(action)
        return redraw or bool(actions) or isinstance(event, KeyEvent)

    async def run(self, stdin_fd: int | None) -> None:
        events = EventSource(self.tick_interval, stdin_fd)
        tasks = start_collectors(self.collectors, self.model, self.bus, self.tick_interval)
        events.start()
        self.running = True
        try:
            with Live(self.draw(), console=self.console, screen=True, auto_refresh=False) as live:
                while self.running:
                    event = await events.next()
                    if self.process(event):
                        live.update(self.draw(), refresh=True)
        finally:
            events.close()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            self.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="EVE edge node terminal dashboard")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--profile",
        default=os.environ.get("EVE_TUI_PROFILE", "release"),
        help=f"Profile name: {'|'.join(BUILTIN_PROFILES)}",
    )
    parser.add_argument("--config", help="Optional JSON config file for profile overrides")
    parser.add_argument("--debug", action="store_true", help="Enable debug shortcuts and debug logging")
    parser.add_argument("--run-dir", help="Override EVE_RUN_DIR path")
    parser.add_argument("--log-dir", help="Override the log directory")
    parser.add_argument("--tick-ms", type=int, help="Tick interval override in milliseconds")
    parser.add_argument("--snapshot", action="store_true", help="Print one static frame and exit")
    parser.add_argument("--json", action="store_true", help="Emit the collected model as JSON")
    args = parser.parse_args(argv)

    try:
        profile = resolve_profile(args.profile, args.config)
    except ValueError as exc:
        parser.error(str(exc))

    if args.debug:
        profile["debug"] = True
        profile["log_level"] = "DEBUG"
    if args.log_dir:
        profile["log_dir"] = args.log_dir
    if args.tick_ms:
        profile["tick_ms"] = max(MIN_TICK_MS, args.tick_ms)
    run_dir = Path(args.run_dir) if args.run_dir else env_run_dir()

    try:
        setup_logging(Path(profile["log_dir"]), profile["log_level"])
    except OSError as exc:
        print(f"eve-tui: cannot open log directory {profile['log_dir']}: {exc}", file=sys.stderr)
        return 1
    log.info("starting eve-tui %s, profile %s, run dir %s", __version__, profile["name"], run_dir)

    console = Console()
    try:
        app = App(profile, run_dir, console)
    except ValueError as exc:
        parser.error(str(exc))

    if args.json:
        app.collect_once()
        print(json.dumps(app.model.snapshot().to_dict(), indent=2, default=str))
        app.close()
        return 0

    if args.snapshot:
        app.collect_once()
        console.print(app.draw())
        app.close()
        return 0

    if not sys.stdin.isatty():
        print("eve-tui: stdin is not a terminal; use --snapshot or --json", file=sys.stderr)
        return 1

    fd = sys.stdin.fileno()
    try:
        with terminal_session(fd):
            asyncio.run(app.run(fd))
    except KeyboardInterrupt:
        return 0
    except TerminalError as exc:
        log.error("%s", exc)
        print(f"eve-tui: {exc}", file=sys.stderr)
        return 1
    finally:
        log.info("eve-tui stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
