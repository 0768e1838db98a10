"""
Entry point for running fml_interpreter as a module.

Usage:
    python -m fml_interpreter layout page.fml --width 800 --height 600
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
