import logging
import sys
from unittest.mock import MagicMock

import pytest

# Configure logging to capture import errors
logger = logging.getLogger(__name__)


def pytest_configure(config):
    """
    Pytest hook to configure the environment before tests run.
    We attempt to import flet. If it fails (common in CI/headless without shared libs),
    we mock it so that the views can still be collected and exercised.
    """
    try:
        import flet as ft

        _ = ft.Icons.SETTINGS
    except (ImportError, OSError, AttributeError) as e:
        logger.warning(f"Flet import failed: {e}. Mocking flet for tests.")
        mock_flet()


def mock_flet():
    """Replaces flet in sys.modules with light control stand-ins."""
    flet_mock = MagicMock()

    class MockControl:
        def __init__(self, *args, **kwargs):
            self.content = kwargs.get("content")
            self.controls = kwargs.get("controls", [])
            self.value = kwargs.get("value")
            self.page = None

            if not self.controls and args and isinstance(args[0], list):
                self.controls = args[0]

            for k, v in kwargs.items():
                setattr(self, k, v)

        def update(self):
            pass

    class MockContainer(MockControl):
        pass

    class MockColumn(MockControl):
        pass

    class MockRow(MockControl):
        pass

    class MockText(MockControl):
        def __init__(self, value=None, *args, **kwargs):
            super().__init__(*args, **kwargs)
            if value is not None:
                self.value = value

    class MockTextField(MockControl):
        pass

    class MockSnackBar(MockControl):
        def __init__(self, content=None, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.content = content

    class MockTabs(MockControl):
        def __init__(self, tabs=None, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.tabs = tabs if tabs else []

    class MockDropdown(MockControl):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.options = kwargs.get("options", [])

    flet_mock.Control = MockControl
    flet_mock.Container = MockContainer
    flet_mock.Column = MockColumn
    flet_mock.Row = MockRow
    flet_mock.Text = MockText
    flet_mock.TextField = MockTextField
    flet_mock.SnackBar = MockSnackBar
    flet_mock.Tabs = MockTabs
    flet_mock.Tab = MockControl
    flet_mock.Dropdown = MockDropdown
    flet_mock.Switch = MockControl
    flet_mock.Checkbox = MockControl
    flet_mock.IconButton = MockControl
    flet_mock.ElevatedButton = MockControl
    flet_mock.Icon = MockControl
    flet_mock.Divider = MockControl

    sys.modules["flet"] = flet_mock


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Points ConfigManager at a config file inside tmp_path."""
    import config_manager

    config_file = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "CONFIG_FILE", config_file)
    yield config_file
