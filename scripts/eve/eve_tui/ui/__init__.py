"""Windows, dialogs and routing for the terminal UI."""
