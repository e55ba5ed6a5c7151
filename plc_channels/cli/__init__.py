"""Command-line interface for the PLC channel assignment engine."""
