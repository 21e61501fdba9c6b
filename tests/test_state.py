"""Tests for network state capture, comparison and encoding."""

import json
import time
from ipaddress import ip_address

import pytest
from conftest import make_interface, make_route

from netchange.config import ObserverConfig
from netchange.errors import SerializationError
from netchange.models.network_models import Interfaces, NetworkChange
from netchange.state import NetworkState

ALL_ENABLED = (
    ObserverConfig()
    .enable_observe_all_interfaces(True)
    .enable_observe_default_route(True)
    .enable_observe_all_routes(True)
    .enable_observe_public_address(True)
)


def make_state(captured_at=1000.0, **overrides):
    """Build a fully populated snapshot."""
    fields = {
        "captured_at": captured_at,
        "default_interface": make_interface("eth0"),
        "all_interfaces": Interfaces.from_list(
            [make_interface("eth0"), make_interface("lo", index=1)]
        ),
        "default_route": make_route(),
        "all_routes": [make_route(), make_route("192.168.1.0", 24, None)],
        "public_address": "203.0.113.7",
    }
    fields.update(overrides)
    return NetworkState(**fields)


class TestCompare:
    """Tests for the ordered change classification."""

    def test_no_change(self):
        """Identical snapshots within the expiry window are unchanged."""
        assert make_state().compare(make_state(1010.0), ALL_ENABLED) is NetworkChange.NONE

    def test_expired(self):
        """Elapsed time at the threshold reports expiry."""
        config = ALL_ENABLED.set_expire_time(60)
        assert make_state(1000.0).compare(make_state(1060.0), config) is (
            NetworkChange.EXPIRED
        )
        assert make_state(1000.0).compare(make_state(1059.0), config) is (
            NetworkChange.NONE
        )

    def test_expiry_dominates_every_other_difference(self):
        """Expiry wins even when every field differs."""
        new = make_state(
            5000.0,
            default_interface=make_interface("wlan0"),
            all_interfaces=Interfaces(),
            default_route=None,
            all_routes=[],
            public_address="198.51.100.1",
        )
        config = ALL_ENABLED.set_expire_time(60)
        assert make_state().compare(new, config) is NetworkChange.EXPIRED

    def test_clock_going_backwards_is_not_expiry(self):
        """A later snapshot with an earlier timestamp counts as no time elapsed."""
        config = ALL_ENABLED.set_expire_time(60)
        assert make_state(1000.0).compare(make_state(0.0), config) is NetworkChange.NONE

    def test_default_interface_beats_public_address(self):
        """When both change, the default interface is reported."""
        new = make_state(
            1010.0,
            default_interface=make_interface("wlan0"),
            public_address="198.51.100.1",
        )
        assert make_state().compare(new, ALL_ENABLED) is NetworkChange.DEFAULT_INTERFACE

    def test_default_interface_checked_without_any_option(self):
        """The default interface is observed even with everything disabled."""
        new = make_state(1010.0, default_interface=None)
        assert make_state().compare(new, ObserverConfig()) is (
            NetworkChange.DEFAULT_INTERFACE
        )

    def test_secondary_interface(self):
        """A change in the interface set is reported when observed."""
        new = make_state(
            1010.0,
            all_interfaces=Interfaces.from_list([make_interface("eth0", mtu=9000)]),
        )
        assert make_state().compare(new, ALL_ENABLED) is (
            NetworkChange.SECONDARY_INTERFACE
        )

    def test_default_route(self):
        """A new gateway is reported as a default route change."""
        new = make_state(1010.0, default_route=make_route(gateway="192.168.1.254"))
        assert make_state().compare(new, ALL_ENABLED) is NetworkChange.DEFAULT_ROUTE

    def test_routing_table(self):
        """A change in the full table is reported when observed."""
        new = make_state(1010.0, all_routes=[make_route()])
        assert make_state().compare(new, ALL_ENABLED) is NetworkChange.ROUTING_TABLE

    def test_routing_table_order_matters(self):
        """The route list is ordered."""
        old = make_state()
        new = make_state(1010.0, all_routes=list(reversed(old.all_routes)))
        assert old.compare(new, ALL_ENABLED) is NetworkChange.ROUTING_TABLE

    def test_public_address(self):
        """A new public address is reported when observed."""
        new = make_state(1010.0, public_address="198.51.100.1")
        assert make_state().compare(new, ALL_ENABLED) is NetworkChange.PUBLIC_ADDRESS

    @pytest.mark.parametrize(
        "field, value",
        [
            ("all_interfaces", Interfaces()),
            ("default_route", None),
            ("all_routes", []),
            ("public_address", "198.51.100.1"),
        ],
    )
    def test_disabled_observations_are_masked(self, field, value):
        """Differences in unobserved fields never trigger a change."""
        new = make_state(1010.0, **{field: value})
        assert make_state().compare(new, ObserverConfig()) is NetworkChange.NONE


class TestCapture:
    """Tests for snapshot acquisition through a probe."""

    def test_defaults_only_observe_default_interface(self, probe):
        """With no options enabled only the default interface is collected."""
        state = NetworkState.capture(ObserverConfig(), probe=probe)
        assert state.default_interface == probe.default_interface
        assert state.all_interfaces is None
        assert state.default_route is None
        assert state.all_routes is None
        assert state.public_address is None
        assert probe.calls == {"default_interface": 1}

    def test_all_observations(self, probe):
        """Every enabled observation is collected."""
        state = NetworkState.capture(ALL_ENABLED, probe=probe)
        assert state.all_interfaces == Interfaces.from_list(probe.interfaces)
        assert state.default_route == probe.default_route
        assert state.all_routes == probe.routes
        assert state.public_address == ip_address("203.0.113.7")

    def test_failures_are_isolated(self, probe):
        """A failing collaborator leaves only its own field empty."""
        probe.default_interface = LookupError("no default interface")
        probe.public_address = TimeoutError("lookup timed out")
        state = NetworkState.capture(ALL_ENABLED, probe=probe)
        assert state.default_interface is None
        assert state.public_address is None
        assert state.default_route == probe.default_route
        assert state.all_routes == probe.routes
        assert state.all_interfaces is not None

    def test_invalid_observations_are_discarded(self, probe):
        """A value that does not validate leaves only its own field empty."""
        probe.public_address = "not-an-ip"
        probe.default_route = "0.0.0.0/0"
        state = NetworkState.capture(ALL_ENABLED, probe=probe)
        assert state.public_address is None
        assert state.default_route is None
        assert state.default_interface == probe.default_interface
        assert state.all_routes == probe.routes

    def test_invalid_default_interface_is_discarded(self, probe):
        """The always-on observation is isolated the same way."""
        probe.default_interface = {"name": "eth0", "unexpected": True}
        state = NetworkState.capture(ObserverConfig(), probe=probe)
        assert state.default_interface is None

    def test_failed_and_disabled_compare_equal(self, probe):
        """A failed observation is indistinguishable from a disabled one."""
        probe.public_address = OSError("network unreachable")
        failed = NetworkState.capture(ALL_ENABLED, probe=probe)
        disabled = NetworkState.capture(
            ALL_ENABLED.enable_observe_public_address(False), probe=probe
        )
        assert failed.public_address == disabled.public_address
        assert failed.compare(disabled, ALL_ENABLED) is NetworkChange.NONE

    def test_captured_at_is_current(self, probe):
        """The snapshot is stamped with the current time."""
        before = time.time()
        state = NetworkState.capture(ObserverConfig(), probe=probe)
        assert before <= state.captured_at <= time.time()

    def test_expired_copy(self):
        """The copy moves the timestamp back and keeps everything else."""
        state = make_state(5000.0)
        expired = state.expired_copy(3600)
        assert expired.captured_at == 1400.0
        assert expired.default_interface == state.default_interface
        assert state.captured_at == 5000.0


class TestEncoding:
    """Tests for the JSON encoding of snapshots."""

    def test_round_trip_full(self):
        """Decoding an encoded snapshot yields an equal snapshot."""
        state = make_state(1700000000.123456)
        assert NetworkState.decode(state.encode()) == state

    def test_round_trip_empty(self):
        """Absent fields survive as explicit nulls."""
        state = NetworkState(captured_at=1.5)
        encoded = state.encode()
        assert b'"public_address":null' in encoded
        assert NetworkState.decode(encoded) == state

    def test_round_trip_ipv6(self):
        """IPv6 routes and addresses round-trip."""
        state = make_state(
            default_route=make_route("::", 0, "fe80::1", 3),
            public_address="2001:db8::42",
        )
        assert NetworkState.decode(state.encode()) == state

    def test_decode_garbage(self):
        """Malformed data raises SerializationError."""
        with pytest.raises(SerializationError):
            NetworkState.decode(b"\x00\x01not json")

    def test_decode_unknown_field(self):
        """Data from an incompatible schema is rejected, not misparsed."""
        with pytest.raises(SerializationError):
            NetworkState.decode(b'{"captured_at": 1.0, "last_update": 1.0}')

    def test_decode_missing_field(self):
        """A snapshot without a timestamp is rejected."""
        with pytest.raises(SerializationError):
            NetworkState.decode(b'{"default_interface": null}')

    @pytest.mark.parametrize(
        "field", ["default_interface", "all_interfaces", "all_routes", "public_address"]
    )
    def test_decode_missing_optional_field(self, field):
        """Optional fields must still be written out, even as null."""
        payload = json.loads(make_state().encode())
        del payload[field]
        with pytest.raises(SerializationError):
            NetworkState.decode(json.dumps(payload).encode())

    def test_decode_only_timestamp(self):
        """A bare timestamp is not a snapshot."""
        with pytest.raises(SerializationError):
            NetworkState.decode(b'{"captured_at": 1.0}')

    def test_decode_route_without_prefix(self):
        """A network route missing its prefix is not read as a default route."""
        payload = json.loads(make_state().encode())
        payload["default_route"] = {
            "destination": "10.0.0.0",
            "gateway": None,
            "ifindex": 2,
        }
        with pytest.raises(SerializationError):
            NetworkState.decode(json.dumps(payload).encode())

    def test_decode_interface_missing_field(self):
        """Nested interface descriptors must be complete too."""
        payload = json.loads(make_state().encode())
        del payload["default_interface"]["mtu"]
        with pytest.raises(SerializationError):
            NetworkState.decode(json.dumps(payload).encode())

    def test_decode_does_not_coerce_types(self):
        """A string timestamp is rejected rather than converted."""
        payload = json.loads(make_state().encode())
        payload["captured_at"] = "12"
        with pytest.raises(SerializationError):
            NetworkState.decode(json.dumps(payload).encode())

    def test_decode_integer_timestamp(self):
        """Whole-number timestamps are valid JSON numbers for captured_at."""
        payload = json.loads(NetworkState(captured_at=5.0).encode())
        payload["captured_at"] = 5
        assert NetworkState.decode(json.dumps(payload).encode()).captured_at == 5.0

    def test_state_is_immutable(self):
        """Snapshots cannot be modified after construction."""
        state = make_state()
        with pytest.raises(ValueError):
            state.captured_at = 0.0
