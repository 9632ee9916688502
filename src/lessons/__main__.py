"""
Entry point for running Lemon Learn as a module.

Usage:
    python -m src.lessons add "Algebra" --tag math
    python -m src.lessons today
    python -m src.lessons --help
"""
from .cli import main

if __name__ == "__main__":
    main()
