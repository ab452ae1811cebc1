"""
Package entry point.

Allows running the application via:

    python -m jurnal

This simply forwards execution to jurnal.cli.main().
"""

from jurnal.cli import main

if __name__ == "__main__":
    main()
