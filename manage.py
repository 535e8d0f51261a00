#!/usr/bin/env python3
"""
Management script: runs the CLI commands from the project root
"""

from trasporti.interfaces.cli.main import main

if __name__ == "__main__":
    main()
