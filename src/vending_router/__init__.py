"""In-process publish/subscribe event router for a simulated vending fleet."""

__version__ = "0.1.0"
