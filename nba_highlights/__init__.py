"""NBA Highlights - select basketball plays from play-by-play logs and cut them into a reel."""

__version__ = "0.1.0"
