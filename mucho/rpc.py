"""Minimal Solana JSON-RPC client used by the inspector and balance commands."""

from __future__ import annotations

import itertools
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Optional

from .constants import BLOCK_UNAVAILABLE_CODES, DEFAULT_COMMITMENT, RETRYABLE_HTTP_CODES
from .errors import MalformedUpstreamData, RpcError
from .models import AccountInfo, Block, Transaction

log = logging.getLogger(__name__)


class RpcClient:
    def __init__(
        self,
        url: str,
        *,
        commitment: str = DEFAULT_COMMITMENT,
        timeout: float = 30.0,
        retries: int = 6,
    ) -> None:
        self.url = url
        self.commitment = commitment
        self.timeout = timeout
        self.retries = retries
        self._ids = itertools.count(1)

    def request_raw(self, method: str, params: list) -> dict:
        payload = json.dumps({"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}).encode()
        req = urllib.request.Request(self.url, data=payload, headers={"Content-Type": "application/json"})
        for attempt in range(self.retries + 1):
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                    return json.loads(resp.read().decode())
            except urllib.error.HTTPError as exc:
                if exc.code in RETRYABLE_HTTP_CODES and attempt < self.retries:
                    log.debug("%s returned HTTP %s, retrying (%d)", method, exc.code, attempt + 1)
                    time.sleep(0.25 * (2**attempt))
                    continue
                raise RpcError(f"RPC HTTP error {exc.code}: {exc.reason}") from exc
            except urllib.error.URLError as exc:
                if attempt < self.retries:
                    log.debug("%s transport error %s, retrying (%d)", method, exc.reason, attempt + 1)
                    time.sleep(0.25 * (2**attempt))
                    continue
                raise RpcError(f"RPC transport error: {exc.reason}") from exc
            except json.JSONDecodeError as exc:
                raise MalformedUpstreamData(f"RPC returned invalid JSON for {method}") from exc
        raise RpcError("RPC request failed after retries")

    def request(self, method: str, params: list) -> Any:
        data = self.request_raw(method, params)
        err = data.get("error")
        if err is not None:
            code = err.get("code") if isinstance(err, dict) else None
            message = err.get("message") if isinstance(err, dict) else err
            raise RpcError(f"RPC error: {message}", code=code)
        if "result" not in data:
            raise MalformedUpstreamData(f"RPC response for {method} has no result")
        return data["result"]

    def get_account_info(self, address: str) -> Optional[AccountInfo]:
        result = self.request(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
        )
        value = result.get("value") if isinstance(result, dict) else None
        if value is None:
            return None
        return AccountInfo.from_rpc(value)

    def get_transaction(self, signature: str) -> Optional[Transaction]:
        # `processed` is not supported by getTransaction
        commitment = "confirmed" if self.commitment == "processed" else self.commitment
        result = self.request(
            "getTransaction",
            [
                signature,
                {"encoding": "json", "commitment": commitment, "maxSupportedTransactionVersion": 0},
            ],
        )
        if result is None:
            return None
        return Transaction.from_rpc(result)

    def get_block(self, slot: int) -> Optional[Block]:
        commitment = "confirmed" if self.commitment == "processed" else self.commitment
        try:
            result = self.request(
                "getBlock",
                [
                    slot,
                    {
                        "encoding": "json",
                        "commitment": commitment,
                        "maxSupportedTransactionVersion": 0,
                        "transactionDetails": "full",
                        "rewards": False,
                    },
                ],
            )
        except RpcError as exc:
            if exc.code in BLOCK_UNAVAILABLE_CODES:
                log.info("block %d unavailable: %s", slot, exc)
                return None
            raise
        if result is None:
            return None
        return Block.from_rpc(slot, result)

    def get_slot_leader(self, slot: int) -> str:
        leaders = self.request("getSlotLeaders", [slot, 1])
        if not isinstance(leaders, list) or not leaders:
            raise MalformedUpstreamData(f"getSlotLeaders returned no leader for slot {slot}")
        return str(leaders[0])

    def get_genesis_hash(self) -> str:
        return str(self.request("getGenesisHash", []))

    def get_balance(self, address: str) -> int:
        result = self.request("getBalance", [address, {"commitment": self.commitment}])
        value = result.get("value") if isinstance(result, dict) else None
        if not isinstance(value, int):
            raise MalformedUpstreamData("getBalance returned no value")
        return value
