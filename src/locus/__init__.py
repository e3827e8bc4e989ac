"""Locus - a collapsible outliner with a plain-text memo store."""

__version__ = "0.1.0"
