from netchange.version.netchange_version import NETCHANGE_VERSION, Version

__all__ = ["NETCHANGE_VERSION", "Version"]
