"""
Package entry point for python -m execution.

USAGE:
    python -m zapret_service_manager                  # Interactive menu
    python -m zapret_service_manager status_zapret    # Print service status
    python -m zapret_service_manager check_updates    # Print version info
"""

import sys

from zapret_service_manager.cli import main

if __name__ == "__main__":
    sys.exit(main())
