"""Password-protected summary portal."""
