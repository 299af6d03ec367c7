"""Roadmap scheduling, RICE prioritisation and markdown round-trip core."""

__version__ = "0.1.0"
