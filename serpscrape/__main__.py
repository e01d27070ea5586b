"""
Entry point for running serpscrape as a module: python -m serpscrape
"""

from serpscrape.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
