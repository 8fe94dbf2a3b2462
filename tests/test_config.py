"""Tests for configuration loading and component wiring."""

from datetime import timedelta

import pytest

from authsync.bootstrap import AuthSyncBootstrap, build_facade, create_container
from authsync.config import AuthSyncConfig, AuthSyncConfigLoader
from authsync.config.schema import RemoteBackend, StorageBackend
from authsync.exceptions import ConfigurationError
from authsync.facade import AuthFacade
from authsync.remote.base import RemoteDocumentStore
from authsync.remote.http import HttpRemoteStore
from authsync.sessions import SessionManager
from authsync.storage.base import KeyValueStore
from authsync.storage.file import FileKeyValueStore
from authsync.store import LocalCredentialStore
from authsync.sync import SyncOrchestrator


class TestAuthSyncConfig:
    """Test the configuration models."""

    def test_defaults(self):
        config = AuthSyncConfig()

        assert config.namespace == "authsync"
        assert config.min_password_length == 4
        assert config.max_username_length == 32
        assert config.salt_bytes == 16
        assert config.session.default_ttl == timedelta(hours=12)
        assert config.session.remember_ttl == timedelta(days=30)
        assert config.storage.backend == StorageBackend.FILE
        assert config.remote.backend == RemoteBackend.NONE
        assert config.remote.timeout == 10.0

    def test_http_backend_requires_url(self):
        with pytest.raises(ValueError):
            AuthSyncConfig(remote={"backend": "http"})

    def test_invalid_namespace(self):
        with pytest.raises(ValueError):
            AuthSyncConfig(namespace="has space")

    def test_non_positive_ttl_rejected(self):
        with pytest.raises(ValueError):
            AuthSyncConfig(session={"default_ttl": 0})


class TestAuthSyncConfigLoader:
    """Test YAML loading with environment substitution."""

    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / "authsync.config.yaml"
        path.write_text(
            """
authsync:
  namespace: myapp
  min_password_length: 8
  session:
    default_ttl: 3600
  storage:
    backend: file
    path: data/store.json
  remote:
    backend: http
    url: https://sync.example.test/doc
    timeout: 2.5
""",
            encoding="utf-8",
        )

        config = AuthSyncConfigLoader.load_config(path)

        assert config.namespace == "myapp"
        assert config.min_password_length == 8
        assert config.session.default_ttl == timedelta(hours=1)
        assert str(config.storage.path) == "data/store.json"
        assert config.remote.backend == RemoteBackend.HTTP
        assert config.remote.timeout == 2.5

    def test_missing_section_yields_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("other: {}\n", encoding="utf-8")

        assert AuthSyncConfigLoader.load_config(path) == AuthSyncConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            AuthSyncConfigLoader.load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("authsync: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            AuthSyncConfigLoader.load_config(path)

    def test_validation_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            AuthSyncConfigLoader.from_dict({"min_password_length": 0})

    def test_env_substitution(self, monkeypatch):
        monkeypatch.setenv("AUTHSYNC_TEST_TOKEN", "s3cret")
        monkeypatch.delenv("AUTHSYNC_TEST_NS", raising=False)

        config = AuthSyncConfigLoader.from_dict(
            {
                "namespace": "${AUTHSYNC_TEST_NS:-fallback}",
                "remote": {
                    "backend": "http",
                    "url": "https://sync.example.test/doc",
                    "headers": {"Authorization": "Bearer ${AUTHSYNC_TEST_TOKEN}"},
                },
            }
        )

        assert config.namespace == "fallback"
        assert config.remote.headers == {"Authorization": "Bearer s3cret"}

    def test_required_env_var_missing(self, monkeypatch):
        monkeypatch.delenv("AUTHSYNC_TEST_URL", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            AuthSyncConfigLoader.from_dict({"remote": {"url": "${AUTHSYNC_TEST_URL:?set the url}"}})

        assert "set the url" in exc_info.value.message

    def test_plain_env_var_missing(self, monkeypatch):
        monkeypatch.delenv("AUTHSYNC_TEST_URL", raising=False)

        with pytest.raises(ConfigurationError):
            AuthSyncConfigLoader.from_dict({"namespace": "${AUTHSYNC_TEST_URL}"})


class TestBootstrap:
    """Test component wiring through the container."""

    def test_components_registered(self, config, clock):
        container = create_container()

        facade = build_facade(config, container, clock=clock)

        assert container.get(AuthFacade) is facade
        assert container.get(LocalCredentialStore) is facade.store
        assert container.get(SyncOrchestrator) is facade.orchestrator
        assert container.get(SessionManager) is facade.sessions
        assert container.get(KeyValueStore) is facade.store.kv
        assert container.get(RemoteDocumentStore) is facade.orchestrator.remote

    def test_file_and_http_backends(self, tmp_path):
        config = AuthSyncConfig(
            storage={"backend": "file", "path": tmp_path / "store.json"},
            remote={"backend": "http", "url": "https://sync.example.test/doc", "timeout": 3},
        )
        bootstrap = AuthSyncBootstrap(config)

        kv = bootstrap.create_kv_store()
        remote = bootstrap.create_remote_store()

        assert isinstance(kv, FileKeyValueStore)
        assert kv.path == tmp_path / "store.json"
        assert isinstance(remote, HttpRemoteStore)
        assert remote.timeout == 3

    def test_no_remote(self):
        assert AuthSyncBootstrap(AuthSyncConfig()).create_remote_store() is None

    def test_null_timeout_reaches_http_client(self):
        config = AuthSyncConfig(
            remote={"backend": "http", "url": "https://sync.example.test/doc", "timeout": None}
        )

        remote = AuthSyncBootstrap(config).create_remote_store()

        assert remote.timeout is None

    def test_config_flows_into_components(self, kv, clock):
        config = AuthSyncConfig(
            namespace="app",
            min_password_length=6,
            salt_bytes=8,
            session={"default_ttl": 60},
            remote={"timeout": None},
        )

        facade = build_facade(config, kv=kv, clock=clock)

        assert facade.min_password_length == 6
        assert facade.hasher.salt_bytes == 8
        assert facade.sessions.default_ttl == timedelta(seconds=60)
        assert facade.store.keys.users == "app.users"
        assert facade.orchestrator.remote is None
        assert facade.orchestrator.remote_timeout is None
