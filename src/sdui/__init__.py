"""sdui — server-driven UI protocol engine."""

__version__ = "0.1.0"
