"""Evolua: habits, tasks and XP for personal growth, with an AI coach."""

__version__ = "0.1.0"
