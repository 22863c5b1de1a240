"""
Exceptions raised by the Minefield engine.
"""


class InvalidConfiguration(ValueError):
    """Board dimensions or mine count outside the playable bounds."""
