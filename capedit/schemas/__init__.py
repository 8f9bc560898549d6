"""Packaged JSON Schemas."""
