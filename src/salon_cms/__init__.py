"""Salon website with a JSON-backed content admin."""

__version__ = "0.1.0"
