"""Command implementations for the muxi CLI."""
