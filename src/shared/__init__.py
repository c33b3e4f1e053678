"""Code shared by every bounded context."""
