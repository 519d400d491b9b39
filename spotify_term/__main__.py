"""
Entry point for running spotify-term as a module: python -m spotify_term
"""

from spotify_term.cli.commands import app

if __name__ == "__main__":
    app()
