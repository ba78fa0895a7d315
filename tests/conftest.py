"""Shared pytest fixtures for ariakernel tests."""

import pytest

from ariakernel.geometry import StaticViewport
from ariakernel.kernel.app import register_app
from ariakernel.keybindings import Keymap, register_os_defaults
from ariakernel.os_commands import create_os_kernel
from ariakernel.testing import OsPage
from ariakernel.zones.registry import ZoneRegistry


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep settings and keybinding files out of the real home directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("ARIAKERNEL_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("ARIAKERNEL_LOG_LEVEL", raising=False)
    return config_dir


@pytest.fixture
def page():
    """Headless page with the OS commands, sensors and default keymap."""
    page = OsPage()
    yield page
    page.cleanup()


@pytest.fixture
def registry():
    registry = ZoneRegistry()
    yield registry
    registry.dispose()


@pytest.fixture
def viewport():
    return StaticViewport()


@pytest.fixture
def kernel(registry, viewport):
    """OS kernel over the ``registry`` and ``viewport`` fixtures."""
    return create_os_kernel(registry, viewport)


@pytest.fixture
def keymap():
    return register_os_defaults(Keymap())


@pytest.fixture
def todo_app(kernel):
    """App slice holding three todo records."""
    return register_app(
        kernel,
        "todo",
        data={
            "items": (
                {"id": "a", "text": "Milk"},
                {"id": "b", "text": "Bread"},
                {"id": "c", "text": "Eggs"},
            )
        },
    )
