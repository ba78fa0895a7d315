"""Configuration for ariakernel."""
