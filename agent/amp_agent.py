"""
amp — Editor Presence Agent
===========================
Broadcasts the current editing context (active file, folder, session
uptime and an activity caption) to a WebSocket listener, and shows the
connection state in a small status window.

PRIVACY: only file NAMES and the folder name are sent. File contents are
never read.

Usage:
    python amp_agent.py [workspace-folder ...]
"""

from amp_core.runner import main


if __name__ == "__main__":
    main()
