#!/usr/bin/env python3
"""
DayZ Dedicated Server Launcher
Container entrypoint; without arguments the server is started.
"""

import sys

from dayz_launcher.cli import main

if __name__ == "__main__":
    sys.exit(main())
