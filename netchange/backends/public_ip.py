"""Public IP address lookup against remote "what is my IP" services."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any

import requests

logger = logging.getLogger(__name__)

IPAddress = IPv4Address | IPv6Address

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "netchange/0.3"


class LookupProvider(str, Enum):
    """Remote services that echo the caller's public address as JSON."""

    MYIP = "https://api.myip.com"
    JSONIP = "https://jsonip.com"
    IPIFY = "https://api.ipify.org?format=json"
    IPINFO = "https://ipinfo.io/json"

    @property
    def url(self) -> str:
        return self.value


DEFAULT_PROVIDERS: tuple[LookupProvider, ...] = (
    LookupProvider.MYIP,
    LookupProvider.JSONIP,
    LookupProvider.IPIFY,
    LookupProvider.IPINFO,
)


def query_provider(
    provider: LookupProvider,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> IPAddress:
    """Ask one provider for the public address.

    Args:
        provider: Service to query.
        timeout: Request timeout in seconds.
        session: Optional requests session to reuse connections.

    Returns
    -------
        The address reported by the provider.

    Raises
    ------
        requests.RequestException: On connection, timeout or HTTP errors.
        ValueError: If the response carries no valid IP address.
    """
    http = session or requests
    response = http.get(
        provider.url, headers={"User-Agent": USER_AGENT}, timeout=timeout
    )
    response.raise_for_status()
    payload: dict[str, Any] = response.json()

    value = payload.get("ip")
    if not isinstance(value, str):
        raise ValueError(f"No 'ip' field in response from {provider.name}")
    return ip_address(value.strip())


def lookup_public_address(
    providers: Sequence[LookupProvider] = DEFAULT_PROVIDERS,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> IPAddress | None:
    """Return the public address from the first provider that answers.

    Providers are tried in order; failures are logged and the next one is
    tried. Returns None when every provider fails.
    """
    for provider in providers:
        try:
            address = query_provider(provider, timeout=timeout, session=session)
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Public IP lookup via {provider.name} failed: {e}")
            continue
        logger.debug(f"Public IP via {provider.name}: {address}")
        return address

    logger.warning("Failed to get public IP address")
    return None


class CachedLookup:
    """Memoizes a successful public address lookup for ``ttl`` seconds.

    Failed lookups are not cached, so the next call retries.
    """

    def __init__(
        self,
        providers: Sequence[LookupProvider] = DEFAULT_PROVIDERS,
        ttl: float = 60.0,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if ttl < 0:
            raise ValueError("ttl must not be negative")
        self.providers = tuple(providers)
        self.ttl = ttl
        self.timeout = timeout
        self._lock = threading.Lock()
        self._address: IPAddress | None = None
        self._fetched_at: float | None = None

    def lookup(self) -> IPAddress | None:
        """Return the cached address, refreshing it once the TTL elapses."""
        with self._lock:
            now = time.monotonic()
            if (
                self._fetched_at is not None
                and self._address is not None
                and now - self._fetched_at < self.ttl
            ):
                return self._address

            address = lookup_public_address(self.providers, timeout=self.timeout)
            if address is not None:
                self._address = address
                self._fetched_at = now
            return address

    def invalidate(self) -> None:
        """Drop the cached address."""
        with self._lock:
            self._address = None
            self._fetched_at = None
