"""Paint Matcher HTTP routes."""
