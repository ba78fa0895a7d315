"""Command kernel, history, persistence and app slices."""
