#!/usr/bin/env python3
"""
Lemon Learn - quick launcher for the lesson CLI.

Usage:
    python lemon.py today          # Lessons due today
    python lemon.py add "Algebra"  # Save a lesson
    python lemon.py --help         # All commands
"""

from src.lessons.cli import main

if __name__ == "__main__":
    main()
