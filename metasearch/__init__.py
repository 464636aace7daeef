"""Metasearch service: configuration loading and the HTTP surface built on it."""

__version__ = "1.0"
