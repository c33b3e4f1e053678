"""Shopping bounded context — scan-to-cart reconciliation."""
