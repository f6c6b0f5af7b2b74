"""Scaffold the Quran Reels Generator skeleton and publish it to GitHub."""

__version__ = "1.0.0"
