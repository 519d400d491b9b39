"""
spotify-term - Spotify playback control from the terminal.
"""

__version__ = "0.1.0"
__logo__ = "🎵"
