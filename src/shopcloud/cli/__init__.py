"""CLI package for shopcloud."""
