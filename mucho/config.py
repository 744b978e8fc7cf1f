"""Command configuration built from the Solana CLI config and Solana.toml."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from solders.keypair import Keypair

from .constants import (
    ALLOWED_COMMITMENTS,
    DEFAULT_ACCOUNTS_DIR,
    DEFAULT_COMMITMENT,
    DEFAULT_CONFIG_FILE,
    DEFAULT_TEST_LEDGER_DIR,
)
from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_KEYPAIR_PATH = "~/.config/solana/id.json"


@dataclass(frozen=True)
class CliConfig:
    json_rpc_url: Optional[str] = None
    url: Optional[str] = None
    keypair_path: str = DEFAULT_KEYPAIR_PATH
    commitment: str = DEFAULT_COMMITMENT
    ledger_dir: str = DEFAULT_TEST_LEDGER_DIR
    account_dir: str = DEFAULT_ACCOUNTS_DIR
    config_path: Optional[str] = None

    @property
    def rpc_fallbacks(self) -> tuple[Optional[str], Optional[str]]:
        return (self.url, self.json_rpc_url)


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}") from exc


def solana_cli_config_path() -> Path:
    path = os.environ.get("SOLANA_CONFIG") or os.environ.get("SOLANA_CONFIG_FILE")
    if path:
        return Path(path).expanduser()
    return Path.home() / ".config" / "solana" / "cli" / "config.yml"


def load_solana_cli_config(path: Path | None = None) -> dict[str, str]:
    cfg_path = path or solana_cli_config_path()
    try:
        text = cfg_path.read_text()
    except OSError:
        return {}
    cfg: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line == "---":
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        value = value.strip().strip("\"'")
        if key:
            cfg[key] = value
    return cfg


def load_solana_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        log.debug("no config file at %s", path)
        return {}
    return _load_toml(path)


def load_config(config_path: str | None = None, solana_config_path: str | None = None) -> CliConfig:
    cli = load_solana_cli_config(Path(solana_config_path).expanduser() if solana_config_path else None)
    toml_path = Path(config_path or DEFAULT_CONFIG_FILE).expanduser()
    project = load_solana_toml(toml_path)
    settings = project.get("settings") if isinstance(project.get("settings"), dict) else {}

    commitment = settings.get("commitment") or cli.get("commitment") or DEFAULT_COMMITMENT
    if commitment not in ALLOWED_COMMITMENTS:
        raise ConfigError(f"Unsupported commitment level: {commitment}")

    return CliConfig(
        json_rpc_url=cli.get("json_rpc_url") or None,
        url=settings.get("url") if isinstance(settings.get("url"), str) else None,
        keypair_path=str(settings.get("keypair") or cli.get("keypair_path") or DEFAULT_KEYPAIR_PATH),
        commitment=commitment,
        ledger_dir=str(settings.get("ledgerDir") or DEFAULT_TEST_LEDGER_DIR),
        account_dir=str(settings.get("accountDir") or DEFAULT_ACCOUNTS_DIR),
        config_path=str(toml_path) if project else None,
    )


def load_keypair_pubkey(path: str) -> str:
    keypair_path = Path(path).expanduser()
    if not keypair_path.exists():
        raise FileNotFoundError(f"Keypair file not found: {keypair_path}")
    try:
        secret = json.loads(keypair_path.read_text())
        keypair = Keypair.from_bytes(bytes(secret))
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"Invalid keypair file: {keypair_path}") from exc
    return str(keypair.pubkey())
