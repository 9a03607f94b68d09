"""Makevars - export build variables to a legacy make build."""

__version__ = "0.1.0"
