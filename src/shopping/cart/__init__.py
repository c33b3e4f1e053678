"""Scan cart aggregate and its single-writer aggregator."""
