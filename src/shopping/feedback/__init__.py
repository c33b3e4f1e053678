"""Transient status feedback for the shopper."""
