"""Scanner input: channel normalization and catalogue lookup gating."""
