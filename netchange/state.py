"""Snapshot of the host's observable network configuration."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from pydantic import Field, IPvAnyAddress, ValidationError

from netchange.config import ObserverConfig
from netchange.errors import SerializationError
from netchange.models.network_models import (
    REQUIRE_ALL_FIELDS,
    InterfaceInfo,
    Interfaces,
    NetworkChange,
    PersistedModel,
    Route,
)

if TYPE_CHECKING:
    from netchange.backends.probe import NetworkProbe
    from netchange.persistence.store import StateStore

logger = logging.getLogger(__name__)


class NetworkState(PersistedModel):
    """A snapshot of network state, immutable once captured.

    Optional fields are None both when the observation is disabled and
    when it failed; comparison treats the two cases the same way.
    """

    captured_at: float = Field(..., description="Unix timestamp of the capture")
    default_interface: InterfaceInfo | None = Field(
        None, description="Interface the host uses by default"
    )
    all_interfaces: Interfaces | None = Field(
        None, description="Every interface, keyed by name"
    )
    default_route: Route | None = Field(None, description="Default route")
    all_routes: list[Route] | None = Field(
        None, description="Full routing table in OS order"
    )
    public_address: IPvAnyAddress | None = Field(
        None, description="Address the outside world sees"
    )

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "forbid"

    @classmethod
    def capture(
        cls, config: ObserverConfig, probe: NetworkProbe | None = None
    ) -> NetworkState:
        """Take a fresh snapshot.

        The default interface is always observed; everything else only when
        enabled in ``config``. Enabled observations run concurrently and a
        failing one leaves just its own field empty.

        Args:
            config: Selects the observations to collect.
            probe: Collaborator facade. A default ``NetworkProbe`` is built
                from ``config`` when omitted.

        Returns
        -------
            The new snapshot.
        """
        if probe is None:
            from netchange.backends.probe import NetworkProbe

            probe = NetworkProbe(
                timeout=config.public_ip_timeout, public_ip_ttl=config.public_ip_ttl
            )

        observations: dict[str, Callable[[], Any]] = {
            "default_interface": probe.get_default_interface,
        }
        if config.observe_all_interfaces:
            observations["all_interfaces"] = lambda: Interfaces.from_list(
                probe.get_interfaces()
            )
        if config.observe_default_route:
            observations["default_route"] = probe.get_default_route
        if config.observe_all_routes:
            observations["all_routes"] = probe.get_all_routes
        if config.observe_public_address:
            observations["public_address"] = probe.get_public_address

        captured_at = time.time()
        with ThreadPoolExecutor(
            max_workers=len(observations), thread_name_prefix="netchange-capture"
        ) as pool:
            futures = {name: pool.submit(fn) for name, fn in observations.items()}
            values = {name: _result_or_none(name, f) for name, f in futures.items()}

        for name, value in values.items():
            if value is not None and not cls._accepts(name, value):
                values[name] = None

        state = cls(captured_at=captured_at, **values)
        logger.debug(f"Captured network state: {state}")
        return state

    @classmethod
    def _accepts(cls, name: str, value: Any) -> bool:
        try:
            cls.model_validate({"captured_at": 0.0, name: value})
        except ValidationError as e:
            logger.warning(f"Discarding invalid {name} observation: {e}")
            return False
        return True

    def compare(self, new: NetworkState, config: ObserverConfig) -> NetworkChange:
        """Classify the transition from this (old) snapshot to ``new``.

        Checks run in priority order and the first match is returned, even
        when several fields changed. Expiry always wins; the default
        interface is checked regardless of config; the remaining checks only
        apply to enabled observations.
        """
        elapsed = max(new.captured_at - self.captured_at, 0.0)
        if elapsed >= config.expire_time:
            return NetworkChange.EXPIRED

        if self.default_interface != new.default_interface:
            return NetworkChange.DEFAULT_INTERFACE

        if config.observe_all_interfaces and self.all_interfaces != new.all_interfaces:
            return NetworkChange.SECONDARY_INTERFACE

        if config.observe_default_route and self.default_route != new.default_route:
            return NetworkChange.DEFAULT_ROUTE

        if config.observe_all_routes and self.all_routes != new.all_routes:
            return NetworkChange.ROUTING_TABLE

        if config.observe_public_address and self.public_address != new.public_address:
            return NetworkChange.PUBLIC_ADDRESS

        return NetworkChange.NONE

    def expired_copy(self, seconds: float) -> NetworkState:
        """Return a copy whose capture time lies ``seconds`` further back."""
        return self.model_copy(update={"captured_at": self.captured_at - seconds})

    def encode(self) -> bytes:
        """Serialize to canonical JSON, keeping explicit nulls.

        Raises
        ------
        SerializationError
            If the state cannot be serialized.
        """
        try:
            return self.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as e:
            raise SerializationError(f"Cannot encode network state: {e}") from e

    @classmethod
    def decode(cls, data: bytes) -> NetworkState:
        """Inverse of ``encode``.

        Every field, optional or not, must be present and of the exact
        JSON type written by ``encode``; nothing is defaulted or coerced.

        Raises
        ------
        SerializationError
            If the data is malformed or was written by an incompatible schema.
        """
        try:
            return cls.model_validate_json(
                data, strict=True, context={REQUIRE_ALL_FIELDS: True}
            )
        except (ValidationError, TypeError) as e:
            raise SerializationError(f"Cannot decode network state: {e}") from e

    def save(self, config: ObserverConfig, store: StateStore | None = None) -> None:
        """Encode, optionally encrypt, and atomically write this snapshot.

        Raises
        ------
        StorageError
            If the state file cannot be written.
        EncryptionError
            If encryption fails.
        """
        store = store or _store_for(config)
        store.write(self.encode())
        logger.debug(f"Saved network state to {store.path}")

    @classmethod
    def load(
        cls, config: ObserverConfig, store: StateStore | None = None
    ) -> NetworkState:
        """Read back a snapshot written by ``save``.

        Raises
        ------
        StorageError
            If the state file is missing or unreadable.
        EncryptionError
            On a wrong key, corruption, or an encryption setting mismatch.
        SerializationError
            If the decrypted data is not a valid snapshot.
        """
        store = store or _store_for(config)
        state = cls.decode(store.read())
        logger.debug(f"Loaded network state from {store.path}")
        return state


def _store_for(config: ObserverConfig) -> StateStore:
    from netchange.persistence.store import StateStore

    return StateStore.for_config(config.state_dir, config.encrypt)


def _result_or_none(name: str, future: Future[Any]) -> Any:
    try:
        return future.result()
    except Exception as e:
        logger.warning(f"Failed to observe {name}: {e}")
        return None
