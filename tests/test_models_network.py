"""Tests for interface sets, routes and change kinds."""

from ipaddress import IPv4Address, IPv6Address

from conftest import make_interface, make_route

from netchange.models.network_models import (
    Interfaces,
    InterfacesDiff,
    NetworkChange,
    Route,
)


class TestInterfaces:
    """Tests for the keyed interface set."""

    def test_from_list_keys_by_name(self):
        """Interfaces are reachable by name."""
        interfaces = Interfaces.from_list([make_interface("eth0"), make_interface("wlan0")])
        assert len(interfaces) == 2
        assert "eth0" in interfaces
        assert interfaces.get("wlan0").name == "wlan0"
        assert interfaces.names() == ["eth0", "wlan0"]

    def test_from_list_last_duplicate_wins(self):
        """A later descriptor with the same name replaces the earlier one."""
        interfaces = Interfaces.from_list(
            [make_interface("eth0", mtu=1500), make_interface("eth0", mtu=9000)]
        )
        assert len(interfaces) == 1
        assert interfaces.get("eth0").mtu == 9000

    def test_equality_ignores_order(self):
        """Set equality does not depend on enumeration order."""
        a = Interfaces.from_list([make_interface("eth0"), make_interface("eth1")])
        b = Interfaces.from_list([make_interface("eth1"), make_interface("eth0")])
        assert a == b

    def test_diff_same(self):
        """Identical sets produce an empty diff."""
        old = Interfaces.from_list([make_interface("eth0")])
        new = Interfaces.from_list([make_interface("eth0")])
        diff = old.diff(new)
        assert diff == InterfacesDiff()
        assert diff.is_empty()

    def test_diff_updated_and_added(self):
        """A changed descriptor is updated, a new name is added."""
        old = Interfaces.from_list([make_interface("eth0")])
        new = Interfaces.from_list(
            [make_interface("eth0", flags="up"), make_interface("eth1")]
        )
        diff = old.diff(new)
        assert diff.updated == {"eth0": make_interface("eth0", flags="up")}
        assert diff.added == {"eth1": make_interface("eth1")}
        assert diff.removed == {}

    def test_diff_removed(self):
        """A name missing from the new set is removed."""
        old = Interfaces.from_list([make_interface("eth0"), make_interface("eth1")])
        new = Interfaces.from_list([make_interface("eth0")])
        diff = old.diff(new)
        assert diff.removed == {"eth1": make_interface("eth1")}
        assert diff.added == {}
        assert diff.updated == {}

    def test_diff_changed(self):
        """Added, removed and updated are reported together and stay disjoint."""
        old = Interfaces.from_list([make_interface("eth0"), make_interface("eth1")])
        new = Interfaces.from_list(
            [make_interface("eth0", flags="up"), make_interface("eth2")]
        )
        diff = old.diff(new)
        assert set(diff.updated) == {"eth0"}
        assert set(diff.added) == {"eth2"}
        assert set(diff.removed) == {"eth1"}
        assert not diff.is_empty()

    def test_diff_is_pure(self):
        """Diffing leaves both sets untouched."""
        old = Interfaces.from_list([make_interface("eth0")])
        new = Interfaces.from_list([make_interface("eth1")])
        old.diff(new)
        assert old.names() == ["eth0"]
        assert new.names() == ["eth1"]


class TestRoute:
    """Tests for route descriptors."""

    def test_addresses_are_parsed(self):
        """String addresses become ipaddress objects."""
        route = make_route()
        assert route.destination == IPv4Address("0.0.0.0")
        assert route.gateway == IPv4Address("192.168.1.1")

    def test_mask_ipv4(self):
        """IPv4 masks cover the prefix bits."""
        assert make_route("10.0.0.0", 8).mask() == IPv4Address("255.0.0.0")
        assert make_route("192.168.1.0", 24).mask() == IPv4Address("255.255.255.0")
        assert make_route("0.0.0.0", 0).mask() == IPv4Address("0.0.0.0")
        assert make_route("10.1.2.3", 32).mask() == IPv4Address("255.255.255.255")

    def test_mask_ipv6(self):
        """IPv6 masks cover the prefix bits."""
        route = Route(destination="fe80::", prefix=64)
        assert route.mask() == IPv6Address("ffff:ffff:ffff:ffff::")

    def test_is_default(self):
        """Only zero-length prefixes are default routes."""
        assert make_route("0.0.0.0", 0).is_default()
        assert Route(destination="::", prefix=0).is_default()
        assert not make_route("192.168.1.0", 24).is_default()


class TestNetworkChange:
    """Tests for the change classification enum."""

    def test_priority_order(self):
        """Members are declared in the order comparisons check them."""
        assert list(NetworkChange) == [
            NetworkChange.NONE,
            NetworkChange.EXPIRED,
            NetworkChange.DEFAULT_INTERFACE,
            NetworkChange.SECONDARY_INTERFACE,
            NetworkChange.DEFAULT_ROUTE,
            NetworkChange.ROUTING_TABLE,
            NetworkChange.PUBLIC_ADDRESS,
        ]

    def test_label(self):
        """Labels are human readable."""
        assert NetworkChange.DEFAULT_INTERFACE.label == "Default interface"
        assert NetworkChange.NONE.label == "None"
