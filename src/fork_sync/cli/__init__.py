"""CLI commands for Fork Sync."""
