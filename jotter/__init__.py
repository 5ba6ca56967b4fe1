"""jotter - terminal productivity tool for tasks, notes, books and publications."""

__version__ = "0.1.0"
