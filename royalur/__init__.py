"""The Royal Game of Ur: game rules, computer opponents, statistics and a terminal front end."""

__version__ = "0.1.0"