"""
CLI command handlers.

Each handler receives the parsed namespace plus a facade and returns the
process exit code.
"""

import logging
from datetime import datetime, timezone

from ..facade import AuthFacade
from ..types import AuthResult
from .utils import prompt_password, prompt_user

logger = logging.getLogger("authsync")


def _format_ms(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).isoformat(timespec="seconds")


def _report(result: AuthResult, success_message: str) -> int:
    if result.ok:
        print(success_message)
        return 0
    print(f"Error: {result.error}")
    return 1


async def handle_status_command(args_ns, facade: AuthFacade) -> int:
    report = await facade.ready()
    users = facade.get_users()
    print(f"Users: {len(users)}")
    for user in users:
        kind = "legacy" if user.is_legacy else "hashed"
        print(f"  {user.username} ({kind}, updated {_format_ms(user.updated_at)})")
    print(f"Store version: {_format_ms(report.version)}")
    print(f"Remote: {report.pull_status.value}")
    session = facade.get_session()
    print(f"Logged in as: {session.username if session else '-'}")
    return 0


async def handle_sync_command(args_ns, facade: AuthFacade) -> int:
    report = await facade.sync_users_now()
    print(
        f"Synced {report.user_count} user(s); remote {report.pull_status.value}, "
        f"{'pushed' if report.pushed else 'nothing pushed'}"
    )
    return 0


async def handle_create_user_command(args_ns, facade: AuthFacade) -> int:
    username = args_ns.username or prompt_user("Username")
    password = prompt_password("Password")
    confirm = prompt_password("Confirm password")
    result = await facade.create_first_user(username, password, confirm)
    return _report(result, f"Created user {result.username}")


async def handle_login_command(args_ns, facade: AuthFacade) -> int:
    username = args_ns.username or prompt_user("Username")
    password = prompt_password("Password")
    result = await facade.login(username, password, remember=args_ns.remember)
    if result.ok and result.session:
        return _report(
            result,
            f"Logged in as {result.username} until {_format_ms(result.session.expires_at)}",
        )
    return _report(result, f"Logged in as {result.username}")


async def handle_logout_command(args_ns, facade: AuthFacade) -> int:
    return _report(facade.logout(), "Logged out")


async def handle_whoami_command(args_ns, facade: AuthFacade) -> int:
    session = facade.get_session()
    if session is None:
        print("Not logged in")
        return 1
    print(f"{session.username} (expires {_format_ms(session.expires_at)})")
    return 0


async def handle_passwd_command(args_ns, facade: AuthFacade) -> int:
    username = args_ns.username
    if not username:
        session = facade.get_session()
        username = session.username if session else prompt_user("Username")
    old_password = prompt_password("Current password")
    new_password = prompt_password("New password")
    result = await facade.change_password(username, old_password, new_password)
    return _report(result, "Password changed")
