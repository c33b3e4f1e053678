"""Confirmation step in front of destructive cart operations."""
