"""CLI settings and logging configuration."""
