"""recordings: a small data-access layer over the ``album`` table."""

__version__ = "0.1.0"
