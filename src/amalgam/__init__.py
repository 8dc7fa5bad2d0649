"""Amalgam: rules engine for a two-player abstract strategy game."""

__version__ = "0.1.0"
