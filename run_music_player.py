#!/usr/bin/env python3
"""Entry point for the Music Player application.

This script starts the desktop player. It can be run directly or used as the
entry point for PyInstaller builds.
"""

import sys
from pathlib import Path

# Add the parent directory to path so we can import music_player
sys.path.insert(0, str(Path(__file__).parent))

from music_player.app import main

if __name__ == "__main__":
    sys.exit(main())
