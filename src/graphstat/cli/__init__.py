"""Command-line interface for graphstat."""
