"""Local test validator command building and detection."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from .constants import DEFAULT_VALIDATOR_RPC_PORT

log = logging.getLogger(__name__)

VALIDATOR_BIN = "solana-test-validator"

_RPC_PORT_RE = re.compile(r"--rpc-port[\s=]+(\d+)")


def build_test_validator_command(
    *,
    reset: bool = False,
    ledger_dir: str | None = None,
    account_dir: str | None = None,
    authority: str | None = None,
    extra_args: List[str] | None = None,
) -> List[str]:
    """Assemble the solana-test-validator argv, loading any fixtures in `account_dir`."""
    cmd = [VALIDATOR_BIN]
    if reset:
        cmd.append("--reset")
    if ledger_dir:
        cmd.extend(["--ledger", ledger_dir])

    if account_dir:
        fixtures = Path(account_dir).resolve()
        if fixtures.is_dir():
            cmd.extend(["--account-dir", str(fixtures)])
            for program in sorted(fixtures.glob("*.so")):
                if authority:
                    cmd.extend(["--upgradeable-program", program.stem, str(program), authority])
                else:
                    cmd.extend(["--bpf-program", program.stem, str(program)])
        else:
            log.info("Accounts directory does not exist: %s (skipping fixtures)", fixtures)

    if extra_args:
        cmd.extend(extra_args)
    return cmd


def running_test_validator_command() -> Optional[str]:
    """Return the command line of a running solana-test-validator, if any."""
    if shutil.which("ps") is None:
        return None
    result = subprocess.run(["ps", "-eo", "args"], capture_output=True, text=True)
    if result.returncode != 0:
        log.debug("ps failed: %s", result.stderr.strip())
        return None
    for line in result.stdout.splitlines():
        line = line.strip()
        if VALIDATOR_BIN in line.split(" ", 1)[0]:
            return line
    return None


def local_rpc_url(command_line: str | None) -> str:
    port = DEFAULT_VALIDATOR_RPC_PORT
    if command_line:
        match = _RPC_PORT_RE.search(command_line)
        if match:
            port = int(match.group(1))
    return f"http://127.0.0.1:{port}"


def run_test_validator(cmd: List[str]) -> int:
    if shutil.which(cmd[0]) is None:
        raise FileNotFoundError(
            f"Unable to detect the '{cmd[0]}'. Do you have it installed?"
        )
    return subprocess.call(cmd)
