"""Entry point for running flashdoc as a module.

Usage:
    python -m flashdoc <command> [options]
"""
from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
