"""Services that read the synchronized index."""
