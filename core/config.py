"""
core/config.py - Configuration loading

Loads the accounts file used when AWS credentials are not taken from the
shared credential profiles, and resolves the GitHub token.

accounts file (JSON):
    {
        "accounts": {
            "production": {
                "account_id": "123456789012",
                "region": "us-east-1",
                "access_key_id": "AKIA...",
                "secret_access_key": "...",
                "session_token": ""
            }
        }
    }

Usage:
    from core.config import load_config

    config = load_config("config.json")
    account = config.get_account("production")
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

PACKAGE_NAME = "app-inventory"
DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_REGION = "us-east-1"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"


@dataclass
class AccountConfig:
    """Credentials and region of one AWS account

    Attributes:
        name: account name (also the shared profile name in profile mode)
        region: AWS region of the tagging API
        account_id: AWS account ID (informational)
        access_key_id: static access key (empty in profile mode)
        secret_access_key: static secret key
        session_token: optional session token
        profile: shared profile name (None = use static keys)
    """

    name: str
    region: str
    account_id: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""
    profile: str | None = None

    @property
    def uses_profile(self) -> bool:
        return self.profile is not None

    @classmethod
    def from_profile(cls, name: str, region: str | None = None) -> AccountConfig:
        """Account backed by the shared credential profile of the same name"""
        return cls(name=name, region=region or default_region(), profile=name)


@dataclass
class AppConfig:
    """Parsed accounts file"""

    accounts: dict[str, AccountConfig] = field(default_factory=dict)
    path: str | None = None

    def get_account(self, name: str) -> AccountConfig:
        try:
            return self.accounts[name]
        except KeyError:
            raise ConfigError(name, f"account not found in {self.path or 'config'}") from None


def _parse_account(name: str, raw: object) -> AccountConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"accounts.{name}", "must be an object")

    region = raw.get("region")
    if not region:
        raise ConfigError(f"accounts.{name}.region", "is required")

    return AccountConfig(
        name=name,
        region=region,
        account_id=str(raw.get("account_id", "")),
        access_key_id=raw.get("access_key_id", ""),
        secret_access_key=raw.get("secret_access_key", ""),
        session_token=raw.get("session_token", ""),
        profile=raw.get("profile"),
    )


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load the accounts file

    Args:
        path: path of the JSON file

    Returns:
        AppConfig

    Raises:
        ConfigError: missing file, invalid JSON or invalid account entry
    """
    config_path = Path(path)
    try:
        with config_path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(str(config_path), "config file not found", e) from e
    except json.JSONDecodeError as e:
        raise ConfigError(str(config_path), "invalid JSON", e) from e

    raw_accounts = data.get("accounts") if isinstance(data, dict) else None
    if not isinstance(raw_accounts, dict):
        raise ConfigError("accounts", "must be an object mapping account names to settings")

    accounts = {name: _parse_account(name, raw) for name, raw in raw_accounts.items()}
    logger.debug(f"loaded {len(accounts)} account(s) from {config_path}")
    return AppConfig(accounts=accounts, path=str(config_path))


def default_region() -> str:
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION


def resolve_github_token(token: str | None = None) -> str:
    """Explicit token, else $GITHUB_TOKEN

    Raises:
        ConfigError: no token available
    """
    resolved = token or os.environ.get(GITHUB_TOKEN_ENV, "")
    if not resolved:
        raise ConfigError(
            "github-token",
            f"GitHub token required. Use --github-token or set the {GITHUB_TOKEN_ENV} environment variable",
        )
    return resolved


def get_version() -> str:
    """Installed package version ("0.0.0" when running from a checkout)"""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"
