"""
Entry point for running the drill CLI as a module.

Usage:
    python -m korean_drill.delivery study vocab
    python -m korean_drill.delivery stats
    python -m korean_drill.delivery --help
"""
from .drill_cli import main

if __name__ == "__main__":
    main()
