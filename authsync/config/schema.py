"""Configuration schema models using Pydantic."""

from __future__ import annotations

import re
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class StorageBackend(str, Enum):
    """Local key-value store implementations."""

    MEMORY = "memory"
    FILE = "file"


class RemoteBackend(str, Enum):
    """Remote document store implementations."""

    NONE = "none"
    MEMORY = "memory"
    HTTP = "http"


class SessionConfig(BaseModel):
    """Login session lifetimes."""

    default_ttl: timedelta = Field(
        timedelta(hours=12), description="Lifetime of a session without 'remember me'"
    )
    remember_ttl: timedelta = Field(
        timedelta(days=30), description="Lifetime of a session with 'remember me'"
    )

    @field_validator("default_ttl", "remember_ttl")
    @classmethod
    def validate_positive(cls, v):
        if v <= timedelta(0):
            raise ValueError("Session TTL must be positive")
        return v


class StorageConfig(BaseModel):
    """Local store configuration."""

    backend: StorageBackend = Field(StorageBackend.FILE, description="Store backend")
    path: Path = Field(
        Path("authsync.store.json"), description="Store file for the file backend"
    )


class RemoteConfig(BaseModel):
    """Remote document store configuration."""

    backend: RemoteBackend = Field(RemoteBackend.NONE, description="Remote backend")
    url: Optional[str] = Field(None, description="Auth document URL for the http backend")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra HTTP headers, e.g. Authorization"
    )
    timeout: Optional[float] = Field(
        10.0, description="Seconds allowed per remote call, null to wait forever"
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Remote timeout must be positive")
        return v

    @model_validator(mode="after")
    def validate_http_url(self):
        if self.backend == RemoteBackend.HTTP and not self.url:
            raise ValueError("The http remote backend requires a url")
        return self


class AuthSyncConfig(BaseModel):
    """Main configuration."""

    namespace: str = Field("authsync", description="Prefix of every local store key")
    min_password_length: int = Field(4, description="Minimum password length")
    max_username_length: int = Field(32, description="Maximum username length")
    salt_bytes: int = Field(16, description="Random salt length in bytes")
    session: SessionConfig = Field(default_factory=SessionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v):
        if not re.match(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$", v or ""):
            raise ValueError(
                "Namespace must start with a letter, digit or underscore and contain only "
                "letters, digits, '_', '.' and '-'"
            )
        return v

    @field_validator("min_password_length", "max_username_length", "salt_bytes")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v
