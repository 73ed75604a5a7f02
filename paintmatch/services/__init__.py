"""Paint Matcher services."""
