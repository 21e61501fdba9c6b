"""
Version command - displays netchange version information
"""

from netchange.version import NETCHANGE_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display netchange version information.

    Args:
        verbose: If True, show additional details like full hash and date
    """
    if verbose:
        print(f"netchange version {NETCHANGE_VERSION.full_version()}")
        print("\nDetailed version information:")
        print(f"  Semantic Version: {'.'.join(map(str, NETCHANGE_VERSION.semver()))}")
        print(f"  Release Date:     {NETCHANGE_VERSION.date.strftime('%Y-%m-%d')}")
        print(f"  Package Hash:     {NETCHANGE_VERSION.hash}")
    else:
        print(f"netchange {NETCHANGE_VERSION}")
