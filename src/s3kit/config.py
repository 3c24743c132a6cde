"""Client configuration profiles.

A profile is a YAML document describing one endpoint::

    endpoint: https://play.min.io
    region: us-east-1
    access_key: Q3AM3UQ867SPQQA43P2F
    secret_key: ...
    timeout: 30

Profiles live in ~/.s3kit/profiles/<name>.yaml and are written with
owner-only permissions since they may hold secrets.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .client import DEFAULT_TIMEOUT, Client
from .credentials import StaticProvider
from .endpoint import Endpoint
from .errors import ConfigurationError
from .logging_config import configure_logging

DEFAULT_PROFILE = "default"
PROFILES_DIR = Path.home() / ".s3kit" / "profiles"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_SECRET_FIELDS = {"secret_key", "session_token"}


class ClientConfig(BaseModel):
    """Everything needed to build a ``Client``."""

    endpoint: str  # "play.min.io", "localhost:9000", "https://s3.us-west-2.amazonaws.com"
    region: Optional[str] = None
    secure: bool = True  # Scheme for endpoints given without one
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    session_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: Optional[str] = None
    log_level: Optional[str] = None

    model_config = {"extra": "forbid"}

    @field_validator('endpoint')
    def validate_endpoint(cls, v):
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip()

    @field_validator('timeout')
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator('log_level')
    def validate_log_level(cls, v):
        if v is None:
            return v
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return v.upper()

    # Loading/saving
    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> 'ClientConfig':
        """Load from YAML string.

        Raises:
            ConfigurationError: If the document is not valid YAML or fails validation
        """
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("client configuration must be a YAML mapping")
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"invalid client configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> 'ClientConfig':
        """Load from a specific YAML file."""
        with open(path) as f:
            return cls.from_yaml_string(f.read())

    @classmethod
    def load(cls, profile: str = DEFAULT_PROFILE) -> 'ClientConfig':
        """Load a named profile.

        Raises:
            FileNotFoundError: If the profile doesn't exist
            ConfigurationError: If the profile is invalid
        """
        path = PROFILES_DIR / f"{profile}.yaml"
        if not path.exists():
            available = cls.list_profiles()
            if available:
                raise FileNotFoundError(
                    f"Profile '{profile}' not found at {path}. Available: {', '.join(available)}"
                )
            raise FileNotFoundError(f"No s3kit profiles found in {PROFILES_DIR}")
        return cls.from_yaml(path)

    @classmethod
    def list_profiles(cls) -> List[str]:
        """Sorted names of the valid profiles."""
        if not PROFILES_DIR.exists():
            return []

        profiles = []
        for yaml_file in PROFILES_DIR.glob("*.yaml"):
            try:
                cls.from_yaml(yaml_file)
            except (ConfigurationError, OSError):
                continue  # Skip invalid files
            profiles.append(yaml_file.stem)
        return sorted(profiles)

    def to_yaml_string(self, include_secrets: bool = False) -> str:
        """Export to YAML; secret key and session token are left out by default."""
        exclude = None if include_secrets else _SECRET_FIELDS
        data = self.model_dump(exclude_none=True, exclude=exclude)
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)

    def to_yaml(self, path: Path) -> None:
        """Save to a YAML file readable by the owner only."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            f.write(self.to_yaml_string(include_secrets=True))
        os.chmod(path, 0o600)

    def save(self, profile: str = DEFAULT_PROFILE) -> Path:
        path = PROFILES_DIR / f"{profile}.yaml"
        self.to_yaml(path)
        return path

    # Building
    def build_endpoint(self) -> Endpoint:
        return Endpoint.from_url(self.endpoint, region=self.region, secure=self.secure)

    def build_provider(self) -> StaticProvider:
        if not self.access_key or not self.secret_key:
            raise ConfigurationError(
                "configuration has no access_key/secret_key; pass a credential provider"
            )
        return StaticProvider(self.access_key, self.secret_key, self.session_token)

    def build_client(self, provider=None, transport=None, codec=None) -> Client:
        """Build a client; ``provider`` overrides the configured static keys."""
        if self.log_level:
            configure_logging(self.log_level)
        return Client(
            endpoint=self.build_endpoint(),
            provider=provider if provider is not None else self.build_provider(),
            transport=transport,
            codec=codec,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )


__all__ = ["ClientConfig", "DEFAULT_PROFILE", "PROFILES_DIR"]
