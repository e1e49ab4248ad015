"""Scaffold and synchronize markdown context artifacts across AI tool directories."""

__version__ = "0.4.0"
