import pytest

from adb_api.catalog import Catalog, CommandDescriptor


class FakeDevice:
    """Stands in for AdbClient: records shell commands, returns canned output."""

    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.commands = []
        self.selected_device = None

    def select_device(self, serial):
        self.selected_device = serial or None

    def shell(self, command):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return self.output or "Command executed successfully"


@pytest.fixture
def fake_device():
    return FakeDevice()


def make_catalog(*phrases):
    return Catalog(
        (p, CommandDescriptor(name=p.title(), description=f"Run {p}", command=f"echo {p.replace(' ', '_')}"))
        for p in phrases
    )


@pytest.fixture
def synthetic_catalog():
    return make_catalog
