"""Command-line interface for Backflow."""
