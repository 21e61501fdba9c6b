"""netchange - detect and classify changes in a host's network configuration."""

from netchange.config import ChangeListener, ObserverConfig
from netchange.errors import (
    EncryptionError,
    NetChangeError,
    SerializationError,
    StorageError,
)
from netchange.models.network_models import (
    InterfaceInfo,
    Interfaces,
    InterfacesDiff,
    NetworkChange,
    Route,
)
from netchange.observer import NetworkObserver
from netchange.state import NetworkState
from netchange.version import NETCHANGE_VERSION, Version

__version__ = str(NETCHANGE_VERSION)
__version_info__ = NETCHANGE_VERSION

__all__ = [
    "NETCHANGE_VERSION",
    "ChangeListener",
    "EncryptionError",
    "InterfaceInfo",
    "Interfaces",
    "InterfacesDiff",
    "NetChangeError",
    "NetworkChange",
    "NetworkObserver",
    "NetworkState",
    "ObserverConfig",
    "Route",
    "SerializationError",
    "StorageError",
    "Version",
    "__version__",
    "__version_info__",
]
