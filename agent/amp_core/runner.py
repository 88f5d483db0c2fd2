"""
Entry point. A crash ends the process; reconnecting is an operator action.
"""

import os
import sys

from .constants import AGENT_VERSION
from .config import log, safe_print, setup_logging
from .app import AgentApp


def main(argv=None):
    """Primary agent entry point. Positional args are workspace folders."""
    setup_logging()
    safe_print("amp presence agent v" + AGENT_VERSION)
    safe_print()

    folders = list(sys.argv[1:] if argv is None else argv) or [os.getcwd()]
    missing = [f for f in folders if not os.path.isdir(f)]
    if missing:
        log.warning("Ignoring missing folders: %s", ", ".join(missing))
        folders = [f for f in folders if f not in missing]

    app = AgentApp(folders)
    try:
        app.run()
    except KeyboardInterrupt:
        safe_print("\nAgent stopped by user.")
    return app
