"""Last-write-wins merge of two record sets."""

from collections.abc import Iterable

from .types import UserRecord


def merge_users(
    local: Iterable[UserRecord] | None,
    remote: Iterable[UserRecord] | None,
) -> list[UserRecord]:
    """Combine local and remote records keyed by normalized username.

    Local records are inserted first, then remote ones. A record replaces the
    current entry when its ``updated_at`` is greater than *or equal to* the
    entry's, so on a timestamp tie the remote copy wins.
    """
    merged: dict[str, UserRecord] = {}
    for source in (local or (), remote or ()):
        for record in source:
            if record is None or not record.username:
                continue
            key = record.normalized_username
            if not key:
                continue
            previous = merged.get(key)
            if previous is None or record.updated_at >= previous.updated_at:
                merged[key] = record
    return list(merged.values())
