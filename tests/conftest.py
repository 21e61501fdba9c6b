"""Shared fixtures: a scriptable probe standing in for the OS and network."""

import logging
from ipaddress import ip_address

import pytest

from netchange.models.network_models import InterfaceInfo, Route
from netchange.utils.logger import Logger


def make_interface(name="eth0", **overrides):
    """Build an interface descriptor with sensible defaults."""
    fields = {
        "name": name,
        "index": 2,
        "addresses": ["192.168.1.10"],
        "mac_address": "aa:bb:cc:dd:ee:ff",
        "is_up": True,
        "is_loopback": False,
        "mtu": 1500,
    }
    fields.update(overrides)
    return InterfaceInfo(**fields)


def make_route(destination="0.0.0.0", prefix=0, gateway="192.168.1.1", ifindex=2):
    """Build a route descriptor."""
    return Route(
        destination=destination, prefix=prefix, gateway=gateway, ifindex=ifindex
    )


class FakeProbe:
    """Probe returning whatever the test assigns; counts calls.

    Assign an exception instance to an attribute to make that observation
    fail.
    """

    def __init__(self):
        self.default_interface = make_interface("eth0")
        self.interfaces = [make_interface("eth0"), make_interface("lo", index=1)]
        self.default_route = make_route()
        self.routes = [make_route(), make_route("192.168.1.0", 24, None)]
        self.public_address = ip_address("203.0.113.7")
        self.calls = {}

    def _answer(self, name, value):
        self.calls[name] = self.calls.get(name, 0) + 1
        if isinstance(value, Exception):
            raise value
        return value

    def get_default_interface(self):
        return self._answer("default_interface", self.default_interface)

    def get_interfaces(self):
        return self._answer("interfaces", self.interfaces)

    def get_default_route(self):
        return self._answer("default_route", self.default_route)

    def get_all_routes(self):
        return self._answer("routes", self.routes)

    def get_public_address(self):
        return self._answer("public_address", self.public_address)


@pytest.fixture
def probe():
    """A fresh fake probe."""
    return FakeProbe()


@pytest.fixture(autouse=True)
def weak_kdf(monkeypatch):
    """Keep key derivation cheap and state files inside the test sandbox."""
    monkeypatch.setenv("NETCHANGE_WEAK_KDF", "1")


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    """Point the default state directory at a temporary path."""
    directory = tmp_path / "state"
    monkeypatch.setenv("NETCHANGE_STATE_DIR", str(directory))
    return directory


@pytest.fixture(autouse=True)
def clean_logger():
    """Leave the netchange logging namespace as each test found it."""
    root = logging.getLogger("netchange")
    handlers = root.handlers[:]
    level = root.level
    propagate = root.propagate
    configured = Logger._configured
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = propagate
    Logger._configured = configured
