"""Command-line client and library for Vers clusters and virtual machines."""

__version__ = "0.1.0"