"""Nutrio progression engine: XP, levels, daily caps and achievements"""

__version__ = "1.0.0"
