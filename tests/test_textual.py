"""Tests for the kernel-driven Textual widgets."""

import pytest

from ariakernel.kernel.commands import Command
from ariakernel.os_commands.types import OS_COPY
from ariakernel.ui import ItemRow, KernelDemoApp, ZoneList


def demo_zone(app):
    return app.kernel.get_state().focus.zone("demo")


@pytest.mark.asyncio
async def test_mounts_with_first_item_focused():
    app = KernelDemoApp()
    async with app.run_test():
        assert app.kernel.get_state().focus.active_zone_id == "demo"
        assert demo_zone(app).focused_item_id == "apple"
        assert len(app.query(ItemRow)) == 4


@pytest.mark.asyncio
async def test_arrow_keys_move_focus():
    app = KernelDemoApp()
    async with app.run_test() as pilot:
        await pilot.press("down")
        await pilot.press("down")
        assert demo_zone(app).focused_item_id == "cherry"
        assert demo_zone(app).selection == ("cherry",)

        await pilot.press("home")
        assert demo_zone(app).focused_item_id == "apple"


@pytest.mark.asyncio
async def test_rows_follow_kernel_state():
    app = KernelDemoApp()
    async with app.run_test() as pilot:
        await pilot.press("end")
        await pilot.pause()
        row = app.query_one(ZoneList).row("date")
        assert row.has_class("-focused")
        assert row.has_class("-selected")
        assert not app.query_one(ZoneList).row("apple").has_class("-focused")


@pytest.mark.asyncio
async def test_typeahead():
    app = KernelDemoApp()
    async with app.run_test() as pilot:
        await pilot.press("c")
        assert demo_zone(app).focused_item_id == "cherry"


@pytest.mark.asyncio
async def test_custom_labels_and_role():
    app = KernelDemoApp({"x": "Bold", "y": "Italic"}, role="toolbar")
    async with app.run_test() as pilot:
        await pilot.press("right")
        assert demo_zone(app).focused_item_id == "y"
        assert demo_zone(app).selection == ()


@pytest.mark.asyncio
async def test_copy_writes_to_terminal_clipboard():
    app = KernelDemoApp()
    copied = []
    app.copy_to_clipboard = copied.append
    async with app.run_test() as pilot:
        await pilot.press("down")
        app.kernel.dispatch(Command(OS_COPY))
        assert copied == ["Banana"]
        assert app.clipboard_store.read().items == ("Banana",)
        assert app.clipboard_store.read().source == "demo"
