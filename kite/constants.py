"""Constants and configuration for the kite editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    VERSION = "0.1.0"

    # Document layout
    TAB_STOP = 8  # Tabs expand to the next multiple of this column

    # Keyboard timing
    READ_TIMEOUT_DECISECONDS = 1  # VTIME for raw-mode reads (100 ms)

    # Quit protection
    QUIT_TIMES = 3  # Consecutive Ctrl-Q presses needed to discard changes

    # Status messages
    STATUS_MESSAGE_TIMEOUT = 5  # Seconds a status message stays visible
    QUERY_MAX_LEN = 256  # Longest text accepted by a prompt
    FILENAME_STATUS_WIDTH = 20  # Filename characters shown in the status bar
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
    WELCOME_MESSAGE = "Kite editor -- version {}"
    QUIT_WARNING_MESSAGE = (
        "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit."
    )
    SAVE_PROMPT = "Save as: %s (ESC to cancel)"
    SEARCH_PROMPT = "Search: %s (Use ESC/Arrows/Enter)"

    # Rendering placeholders
    FILLER_GLYPH = "~"
    NO_NAME = "[No Name]"
    NO_FILETYPE = "no ft"

    # Environment
    LOG_FILE_ENV = "KITE_LOG"  # Path to a debug log file
