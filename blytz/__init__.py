"""Client library for the Blytz marketplace backend."""

__version__ = "0.3.0"
