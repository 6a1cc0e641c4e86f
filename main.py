#!/usr/bin/env python
"""
Air Canvas - Main Entry Point
=============================
Run the air drawing application.
"""

from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent / ".env")

from air_canvas.ui import main

if __name__ == "__main__":
    main()
