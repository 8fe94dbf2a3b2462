"""
CLI argument parser.

This module contains the argument parser setup for the authsync CLI.
"""

import argparse

from .. import __version__
from ..config.loader import DEFAULT_CONFIG_FILE
from .commands import (
    handle_create_user_command,
    handle_login_command,
    handle_logout_command,
    handle_passwd_command,
    handle_status_command,
    handle_sync_command,
    handle_whoami_command,
)


def create_parser():
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="authsync",
        description="Manage the local credential store and its remote sync.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--config",
        "-c",
        help=f"Path to config file. Default: ./{DEFAULT_CONFIG_FILE} if present, built-in defaults otherwise.",
        default=None,
    )

    subparsers = parser.add_subparsers(
        title="commands", dest="command", required=False, help="Command to execute"
    )

    status_parser = subparsers.add_parser("status", help="Show users, store version and session.")
    status_parser.set_defaults(func=handle_status_command)

    sync_parser = subparsers.add_parser("sync", help="Synchronize with the remote store now.")
    sync_parser.set_defaults(func=handle_sync_command)

    create_user_parser = subparsers.add_parser("create-user", help="Create the first user.")
    create_user_parser.add_argument("username", nargs="?", help="Username (prompted if omitted)")
    create_user_parser.set_defaults(func=handle_create_user_command)

    login_parser = subparsers.add_parser("login", help="Log in and start a session.")
    login_parser.add_argument("username", nargs="?", help="Username (prompted if omitted)")
    login_parser.add_argument(
        "--remember", action="store_true", help="Keep the session for 30 days instead of 12 hours."
    )
    login_parser.set_defaults(func=handle_login_command)

    logout_parser = subparsers.add_parser("logout", help="End the current session.")
    logout_parser.set_defaults(func=handle_logout_command)

    whoami_parser = subparsers.add_parser("whoami", help="Show the logged in user.")
    whoami_parser.set_defaults(func=handle_whoami_command)

    passwd_parser = subparsers.add_parser("passwd", help="Change a user's password.")
    passwd_parser.add_argument(
        "username", nargs="?", help="Username (defaults to the logged in user)"
    )
    passwd_parser.set_defaults(func=handle_passwd_command)

    return parser
