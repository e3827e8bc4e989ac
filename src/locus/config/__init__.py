"""Configuration loading for Locus."""
