import dataclasses
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from solders.keypair import Keypair

from mucho.config import CliConfig, load_config, load_keypair_pubkey, load_solana_cli_config
from mucho.errors import ConfigError

CLI_CONFIG = """---
json_rpc_url: "https://api.devnet.solana.com"
websocket_url: ""
keypair_path: /home/dev/.config/solana/id.json
address_labels:
  "11111111111111111111111111111111": System Program
commitment: finalized
"""


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        self.cli_path = self.root / "config.yml"
        self.cli_path.write_text(CLI_CONFIG)

    def test_solana_cli_config(self) -> None:
        cfg = load_solana_cli_config(self.cli_path)
        self.assertEqual(cfg["json_rpc_url"], "https://api.devnet.solana.com")
        self.assertEqual(cfg["keypair_path"], "/home/dev/.config/solana/id.json")
        self.assertEqual(cfg["commitment"], "finalized")

    def test_missing_cli_config_is_empty(self) -> None:
        self.assertEqual(load_solana_cli_config(self.root / "nope.yml"), {})

    def test_solana_cli_config_env(self) -> None:
        with patch.dict("os.environ", {"SOLANA_CONFIG": str(self.cli_path)}):
            cfg = load_solana_cli_config()
        self.assertEqual(cfg["commitment"], "finalized")

    def test_defaults_without_toml(self) -> None:
        config = load_config(str(self.root / "Solana.toml"), str(self.cli_path))
        self.assertIsNone(config.url)
        self.assertEqual(config.json_rpc_url, "https://api.devnet.solana.com")
        self.assertEqual(config.commitment, "finalized")
        self.assertEqual(config.ledger_dir, "test-ledger")
        self.assertEqual(config.account_dir, ".cache/accounts")
        self.assertIsNone(config.config_path)
        self.assertEqual(config.rpc_fallbacks, (None, "https://api.devnet.solana.com"))

    def test_solana_toml_settings_take_precedence(self) -> None:
        toml_path = self.root / "Solana.toml"
        toml_path.write_text(
            "[settings]\n"
            'url = "testnet"\n'
            'keypair = "~/keys/dev.json"\n'
            'ledgerDir = "ledger"\n'
            'accountDir = "fixtures"\n'
            'commitment = "processed"\n'
        )
        config = load_config(str(toml_path), str(self.cli_path))
        self.assertEqual(config.rpc_fallbacks, ("testnet", "https://api.devnet.solana.com"))
        self.assertEqual(config.keypair_path, "~/keys/dev.json")
        self.assertEqual(config.ledger_dir, "ledger")
        self.assertEqual(config.account_dir, "fixtures")
        self.assertEqual(config.commitment, "processed")
        self.assertEqual(config.config_path, str(toml_path))

    def test_malformed_toml(self) -> None:
        toml_path = self.root / "Solana.toml"
        toml_path.write_text("[settings\nurl = ")
        with self.assertRaises(ConfigError):
            load_config(str(toml_path), str(self.cli_path))

    def test_bad_commitment(self) -> None:
        toml_path = self.root / "Solana.toml"
        toml_path.write_text('[settings]\ncommitment = "max"\n')
        with self.assertRaises(ConfigError):
            load_config(str(toml_path), str(self.cli_path))

    def test_config_is_frozen(self) -> None:
        config = CliConfig()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.url = "devnet"  # type: ignore[misc]


class KeypairTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def test_pubkey_from_keypair_file(self) -> None:
        keypair = Keypair()
        path = self.root / "id.json"
        path.write_text(json.dumps(list(bytes(keypair))))
        self.assertEqual(load_keypair_pubkey(str(path)), str(keypair.pubkey()))

    def test_missing_keypair(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_keypair_pubkey(str(self.root / "missing.json"))

    def test_invalid_keypair(self) -> None:
        path = self.root / "bad.json"
        path.write_text(json.dumps([1, 2, 3]))
        with self.assertRaises(ConfigError):
            load_keypair_pubkey(str(path))


if __name__ == "__main__":
    unittest.main()
