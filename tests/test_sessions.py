"""Tests for the single-slot session manager."""

import json
from datetime import timedelta

import pytest

from authsync.sessions import SessionManager
from authsync.store import StorageKeys
from tests.helpers import DAY_MS, HOUR_MS


class TestSessionManager:
    """Test issuing, reading and revoking sessions."""

    def test_issue_default_ttl_is_twelve_hours(self, sessions, clock):
        session = sessions.issue("Alice")

        assert session.username == "Alice"
        assert session.created_at == clock.now
        assert session.expires_at - session.created_at == 12 * HOUR_MS

    def test_issue_remember_ttl_is_thirty_days(self, sessions):
        session = sessions.issue("Alice", remember=True)

        assert session.expires_at - session.created_at == 30 * DAY_MS

    def test_issue_persists_session(self, sessions, kv):
        sessions.issue("Alice")

        stored = json.loads(kv.get("authsync.session"))
        assert stored["username"] == "Alice"
        assert set(stored) == {"username", "createdAt", "expiresAt"}

    def test_current_returns_stored_session(self, sessions):
        issued = sessions.issue("Alice")

        assert sessions.current() == issued

    def test_current_without_session(self, sessions):
        assert sessions.current() is None

    def test_session_valid_until_exact_expiry(self, sessions, clock):
        issued = sessions.issue("Alice")
        clock.now = issued.expires_at

        assert sessions.current() == issued

    def test_expired_session_is_purged_on_read(self, sessions, kv, clock):
        issued = sessions.issue("Alice")
        clock.now = issued.expires_at + 1

        assert sessions.current() is None
        assert kv.get("authsync.session") is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            "null",
            json.dumps({"expiresAt": 9_999_999_999_999}),
            json.dumps({"username": "", "expiresAt": 9_999_999_999_999}),
            json.dumps({"username": "alice"}),
            json.dumps({"username": "alice", "expiresAt": "later"}),
        ],
    )
    def test_malformed_session_is_purged(self, sessions, kv, raw):
        kv.set("authsync.session", raw)

        assert sessions.current() is None
        assert kv.get("authsync.session") is None

    def test_new_login_replaces_previous_session(self, sessions, clock):
        sessions.issue("Alice", remember=True)
        clock.advance(1000)

        second = sessions.issue("Bob")

        assert sessions.current() == second
        assert second.created_at == clock.now

    def test_revoke(self, sessions, kv):
        sessions.issue("Alice")

        sessions.revoke()
        sessions.revoke()

        assert sessions.current() is None
        assert kv.get("authsync.session") is None

    def test_namespace_and_custom_ttls(self, kv, clock):
        manager = SessionManager(
            kv,
            keys=StorageKeys("app"),
            default_ttl=timedelta(minutes=5),
            remember_ttl=timedelta(hours=1),
            clock=clock,
        )

        session = manager.issue("alice")

        assert kv.get("app.session") is not None
        assert session.expires_at - session.created_at == 5 * 60 * 1000
        assert manager.ttl_for(True) == timedelta(hours=1)

    def test_rejects_non_positive_ttl(self, kv):
        with pytest.raises(ValueError):
            SessionManager(kv, default_ttl=timedelta(0))
