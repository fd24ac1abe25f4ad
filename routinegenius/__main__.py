"""
Package entry point.

Allows running the application via:

    python -m routinegenius

This simply forwards execution to routinegenius.cli.main().
"""

from routinegenius.cli import main

if __name__ == "__main__":
    main()
