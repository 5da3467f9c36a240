"""Provider adapters for each pipeline stage."""
