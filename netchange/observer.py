"""Network observer: detects and classifies changes between snapshots."""

from __future__ import annotations

import logging
from types import TracebackType

from netchange.backends.probe import NetworkProbe
from netchange.config import ObserverConfig
from netchange.errors import NetChangeError
from netchange.models.network_models import NetworkChange
from netchange.persistence.store import StateStore
from netchange.state import NetworkState

logger = logging.getLogger(__name__)


class NetworkObserver:
    """Owns the last network snapshot and reports how the network changed.

    The observer is a context manager; leaving the block closes it, which
    persists the last snapshot when ``config.persist`` is set::

        with NetworkObserver(ObserverConfig().enable_persist(True)) as observer:
            while True:
                change = observer.state_change()
                ...

    One observer must be driven from a single call site at a time; it does
    no locking of its own.

    Args:
        config: Observation and persistence settings.
        probe: Collaborator facade for captures. Built from ``config`` when
            omitted.
        store: State file storage. Built from ``config`` when omitted.
    """

    def __init__(
        self,
        config: ObserverConfig | None = None,
        probe: NetworkProbe | None = None,
        store: StateStore | None = None,
    ) -> None:
        self.config = config or ObserverConfig()
        self._probe = probe or NetworkProbe(
            timeout=self.config.public_ip_timeout,
            public_ip_ttl=self.config.public_ip_ttl,
        )
        self._store = store
        self._closed = False
        self._last_state = self._initial_state()

    def _initial_state(self) -> NetworkState:
        if self.config.persist:
            logger.debug("Loading persisted network state")
            try:
                return NetworkState.load(self.config, store=self._state_store())
            except NetChangeError as e:
                logger.info(f"No usable persisted state ({e}), starting fresh")

        # Seed an already expired baseline so the first poll reports EXPIRED
        state = NetworkState.capture(self.config, probe=self._probe)
        return state.expired_copy(self.config.expire_time)

    def _state_store(self) -> StateStore:
        if self._store is None:
            self._store = StateStore.for_config(
                self.config.state_dir, self.config.encrypt
            )
        return self._store

    @property
    def last_state(self) -> NetworkState:
        """The snapshot the next capture is compared against."""
        return self._last_state

    @property
    def closed(self) -> bool:
        return self._closed

    def current_state(self) -> NetworkState:
        """Capture a fresh snapshot without touching the stored one."""
        return NetworkState.capture(self.config, probe=self._probe)

    def state_change(self) -> NetworkChange:
        """Capture, classify against the stored snapshot, and record changes.

        When a change is detected the ``on_change`` listener runs before the
        stored snapshot is replaced; exceptions it raises propagate to the
        caller and leave the stored snapshot untouched.

        Returns
        -------
            The change kind, ``NetworkChange.NONE`` included.
        """
        current = self.current_state()
        change = self._last_state.compare(current, self.config)

        if change is not NetworkChange.NONE:
            logger.info(f"Network change detected: {change.value}")
            if self.config.on_change is not None:
                self.config.on_change(change, self._last_state, current)
            self._last_state = current

        return change

    def state_did_change(self) -> bool:
        """Return True when ``state_change()`` reports anything but NONE."""
        return self.state_change() is not NetworkChange.NONE

    def save(self) -> None:
        """Persist the stored snapshot now.

        Raises
        ------
        StorageError
            If the state file cannot be written.
        EncryptionError
            If encryption fails.
        """
        self._last_state.save(self.config, store=self._state_store())

    def close(self) -> None:
        """Release the observer, persisting the stored snapshot if enabled.

        Persistence failures are logged, not raised. Calling ``close`` more
        than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True

        if not self.config.persist:
            return
        logger.debug("Persisting network state")
        try:
            self.save()
        except NetChangeError as e:
            logger.warning(f"Failed to persist network state: {e}")

    def __enter__(self) -> NetworkObserver:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
