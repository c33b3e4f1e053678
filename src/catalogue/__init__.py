"""Catalogue bounded context."""
