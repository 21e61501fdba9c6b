#!/usr/bin/env python3
"""netchange CLI - Command-line interface for netchange."""

from pathlib import Path

import click

from netchange.config import ObserverConfig
from netchange.utils.logger import Logger


def _observation_options(func):
    """Attach the observation toggles shared by state and watch."""
    options = [
        click.option(
            "--all-interfaces",
            is_flag=True,
            default=False,
            help="Observe the full interface set",
        ),
        click.option(
            "--default-route",
            is_flag=True,
            default=False,
            help="Observe the default route",
        ),
        click.option(
            "--all-routes",
            is_flag=True,
            default=False,
            help="Observe the full routing table",
        ),
        click.option(
            "--public-address",
            is_flag=True,
            default=False,
            help="Observe the public IP address (queries remote services)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(
    all_interfaces, default_route, all_routes, public_address, **overrides
):
    """Merge CLI flags over the NETCHANGE_* environment configuration."""
    config = ObserverConfig.from_env()
    if all_interfaces:
        config = config.enable_observe_all_interfaces(True)
    if default_route:
        config = config.enable_observe_default_route(True)
    if all_routes:
        config = config.enable_observe_all_routes(True)
    if public_address:
        config = config.enable_observe_public_address(True)

    if overrides.get("expire_time") is not None:
        config = config.set_expire_time(overrides["expire_time"])
    if overrides.get("persist") is not None:
        config = config.enable_persist(overrides["persist"])
    if overrides.get("encrypt") is not None:
        config = config.enable_encryption(overrides["encrypt"])
    if overrides.get("state_dir") is not None:
        config = config.set_state_dir(Path(overrides["state_dir"]))
    return config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def netchange(verbose):
    """netchange command-line tool for detecting network configuration changes."""
    if not Logger.is_configured():
        Logger.configure_from_env()
    if verbose:
        Logger.set_level("DEBUG")


@netchange.command()
@_observation_options
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
def state(all_interfaces, default_route, all_routes, public_address, as_json):
    """Capture and print the current network state."""
    from netchange.commands.state_cmd import run_state

    config = _build_config(all_interfaces, default_route, all_routes, public_address)
    run_state(config, as_json=as_json)


@netchange.command()
@_observation_options
@click.option(
    "--interval",
    "-i",
    type=click.FloatRange(min=0, min_open=True),
    default=1.0,
    show_default=True,
    help="Polling interval in seconds",
)
@click.option(
    "--duration",
    "-d",
    type=click.FloatRange(min=0),
    default=None,
    help="Stop after this many seconds (default: run until Ctrl+C)",
)
@click.option(
    "--expire-time",
    type=click.IntRange(min=0),
    default=None,
    help="Report the state as expired after this many seconds",
)
@click.option(
    "--persist/--no-persist",
    default=None,
    help="Remember the last state across runs",
)
@click.option(
    "--encrypt/--no-encrypt",
    default=None,
    help="Encrypt the persisted state",
)
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the persisted state",
)
def watch(
    all_interfaces,
    default_route,
    all_routes,
    public_address,
    interval,
    duration,
    expire_time,
    persist,
    encrypt,
    state_dir,
):
    r"""Poll the network and print every change.

    \b
    Examples:
      netchange watch                              # Default interface only
      netchange watch --all-interfaces --default-route
      netchange watch --persist --interval 5       # Remember state across runs
      netchange watch --public-address -d 60       # Stop after a minute
    """
    from netchange.commands.watch_cmd import run_watch

    config = _build_config(
        all_interfaces,
        default_route,
        all_routes,
        public_address,
        expire_time=expire_time,
        persist=persist,
        encrypt=encrypt,
        state_dir=state_dir,
    )
    run_watch(config, interval_seconds=interval, duration_seconds=duration)


@netchange.command()
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the persisted state",
)
def reset(state_dir):
    """Forget the persisted network state."""
    from netchange.commands.reset_cmd import run_reset

    config = ObserverConfig.from_env()
    if state_dir is not None:
        config = config.set_state_dir(Path(state_dir))
    run_reset(config)


@netchange.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display netchange version information."""
    from netchange.commands.version_cmd import run_version

    run_version(verbose=verbose)


if __name__ == "__main__":
    netchange()
