"""Command-line interface for shopdb."""
