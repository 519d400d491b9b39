"""CLI module for spotify-term."""
