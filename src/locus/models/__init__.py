"""Pydantic data models for Locus."""
