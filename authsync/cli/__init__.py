"""Command-line interface for authsync."""

import asyncio
import logging
import os
import sys
from pathlib import Path

from ..bootstrap import build_facade
from ..config.loader import AuthSyncConfigLoader
from ..config.schema import AuthSyncConfig
from ..exceptions import AuthSyncError
from .parser import create_parser
from .utils import configure_logging

logger = logging.getLogger("authsync")


def load_cli_config(config_arg: str | None) -> AuthSyncConfig:
    """Explicit ``--config`` must exist; the default file is optional."""
    if config_arg:
        return AuthSyncConfigLoader.load_config(Path(config_arg))
    default_path = AuthSyncConfigLoader.get_default_config_path()
    if default_path.exists():
        return AuthSyncConfigLoader.load_config(default_path)
    return AuthSyncConfig()


async def _run(handler, args_ns, config: AuthSyncConfig) -> int:
    facade = build_facade(config)
    try:
        return await handler(args_ns, facade)
    finally:
        remote = facade.orchestrator.remote
        if remote is not None and hasattr(remote, "close"):
            await remote.close()


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args_ns = parser.parse_args(argv)

    configure_logging(debug=args_ns.debug or bool(os.getenv("AUTHSYNC_DEBUG")))
    logger.debug("Debug logging enabled.")

    if not hasattr(args_ns, "func"):
        parser.print_help()
        return 0

    try:
        config = load_cli_config(args_ns.config)
        return asyncio.run(_run(args_ns.func, args_ns, config))
    except AuthSyncError as e:
        logger.error(e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
