"""CLI command groups for ariakernel."""
