"""Kite CLI entry point.

Allows running via `python -m kite` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys

from .constants import EditorConstants


def configure_logging() -> None:
    """Send log records to $KITE_LOG, or nowhere.

    The terminal belongs to the editor while it runs, so nothing may be
    printed to stderr.
    """
    log_file = os.environ.get(EditorConstants.LOG_FILE_ENV)
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    else:
        logging.getLogger().addHandler(logging.NullHandler())


def main() -> None:
    # Very small arg parsing: an optional filename and nothing else
    args = sys.argv[1:]
    if len(args) > 1:
        print("Usage: kite [filename]", file=sys.stderr)
        sys.exit(2)

    configure_logging()

    from .editor import Editor
    from .settings import load_settings
    from .terminal import TerminalError

    editor = Editor(settings=load_settings())
    editor.set_status_message(EditorConstants.HELP_MESSAGE)
    if args:
        editor.load_file(args[0])
    try:
        editor.run()
    except TerminalError as e:
        # Raw mode is already restored by Editor.run
        logging.getLogger(__name__).error("Fatal terminal error: %s", e)
        print(f"kite: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
