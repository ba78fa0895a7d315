"""Test helpers for driving the kernel without a UI."""

from .page import OsPage

__all__ = ["OsPage"]
