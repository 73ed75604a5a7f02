"""Paint Matcher utilities: logging, metrics, IDs."""
