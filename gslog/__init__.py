"""Leveled logging: levels, records, text and JSON formatters, buffered writers and handlers."""

__version__ = "0.1.0"