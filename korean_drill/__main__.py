"""
Entry point for running korean-drill as a module.

Usage:
    python -m korean_drill study vocab
    python -m korean_drill --help
"""
from korean_drill.delivery.drill_cli import main

if __name__ == "__main__":
    main()
