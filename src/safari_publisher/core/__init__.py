"""Core publish stages for safari-publisher."""
