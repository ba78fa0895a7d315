"""Textual widgets driven by the kernel."""

from .zone_list import ItemRow, KernelDemoApp, ZoneList

__all__ = ["ItemRow", "KernelDemoApp", "ZoneList"]
