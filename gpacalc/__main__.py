"""
Package entry point.

Allows running the application via:

    python -m gpacalc

This simply forwards execution to gpacalc.cli.main().
"""

from gpacalc.cli import main

if __name__ == "__main__":
    main()
