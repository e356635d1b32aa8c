"""HTTP delivery layer."""
