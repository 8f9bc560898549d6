"""Catalog, type definition and service internals."""
