"""
CLI utility functions.

This module contains helper functions used across the CLI commands.
"""

import getpass
import logging
import sys

logger = logging.getLogger("authsync")


def configure_logging(debug: bool = False) -> None:
    """Attach a stream handler to the ``authsync`` logger once."""
    if not logger.hasHandlers():
        handler = logging.StreamHandler(sys.stderr)
        if debug:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def prompt_user(text: str, default: str | None = None) -> str:
    """Prompts the user for input with an optional default value."""
    prompt_text = f"{text}"
    if default is not None:
        prompt_text += f" [{default}]"
    prompt_text += ": "

    while True:
        response = input(prompt_text).strip()
        if response:
            return response
        if default is not None:
            return default


def prompt_password(text: str = "Password") -> str:
    return getpass.getpass(f"{text}: ")
