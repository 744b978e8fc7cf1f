import io
import json
import unittest
import urllib.error
from unittest.mock import MagicMock, patch

from mucho.errors import MalformedUpstreamData, RpcError
from mucho.rpc import RpcClient

URL = "https://api.devnet.solana.com"


def _response(payload: object) -> MagicMock:
    resp = MagicMock()
    resp.read.return_value = json.dumps(payload).encode()
    resp.__enter__.return_value = resp
    return resp


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(URL, code, "Too Many Requests", {}, io.BytesIO(b""))


class RpcClientTests(unittest.TestCase):
    def setUp(self) -> None:
        sleep = patch("mucho.rpc.time.sleep")
        sleep.start()
        self.addCleanup(sleep.stop)
        self.client = RpcClient(URL, commitment="confirmed", retries=2)

    def _sent(self, mock_urlopen: MagicMock) -> dict:
        request = mock_urlopen.call_args.args[0]
        return json.loads(request.data.decode())

    def test_retries_rate_limits(self) -> None:
        with patch(
            "mucho.rpc.urllib.request.urlopen",
            side_effect=[_http_error(429), _response({"jsonrpc": "2.0", "id": 1, "result": "hash"})],
        ) as mock_urlopen:
            self.assertEqual(self.client.get_genesis_hash(), "hash")
        self.assertEqual(mock_urlopen.call_count, 2)
        self.assertEqual(self._sent(mock_urlopen)["method"], "getGenesisHash")

    def test_gives_up_after_retries(self) -> None:
        with patch("mucho.rpc.urllib.request.urlopen", side_effect=_http_error(503)) as mock_urlopen:
            with self.assertRaises(RpcError):
                self.client.get_genesis_hash()
        self.assertEqual(mock_urlopen.call_count, 3)

    def test_client_errors_are_not_retried(self) -> None:
        with patch("mucho.rpc.urllib.request.urlopen", side_effect=_http_error(400)) as mock_urlopen:
            with self.assertRaises(RpcError):
                self.client.get_genesis_hash()
        self.assertEqual(mock_urlopen.call_count, 1)

    def test_json_rpc_error(self) -> None:
        payload = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}}
        with patch("mucho.rpc.urllib.request.urlopen", return_value=_response(payload)):
            with self.assertRaises(RpcError) as ctx:
                self.client.get_balance("11111111111111111111111111111111")
        self.assertEqual(ctx.exception.code, -32602)

    def test_account_not_found(self) -> None:
        payload = {"jsonrpc": "2.0", "id": 1, "result": {"context": {"slot": 1}, "value": None}}
        with patch("mucho.rpc.urllib.request.urlopen", return_value=_response(payload)) as mock_urlopen:
            self.assertIsNone(self.client.get_account_info("11111111111111111111111111111111"))
        params = self._sent(mock_urlopen)["params"]
        self.assertEqual(params[1], {"encoding": "base64", "commitment": "confirmed"})

    def test_transaction_uses_confirmed_for_processed(self) -> None:
        client = RpcClient(URL, commitment="processed")
        payload = {"jsonrpc": "2.0", "id": 1, "result": None}
        with patch("mucho.rpc.urllib.request.urlopen", return_value=_response(payload)) as mock_urlopen:
            self.assertIsNone(client.get_transaction("sig"))
        params = self._sent(mock_urlopen)["params"]
        self.assertEqual(params[1]["commitment"], "confirmed")
        self.assertEqual(params[1]["maxSupportedTransactionVersion"], 0)

    def test_skipped_block_is_none(self) -> None:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32007, "message": "Slot 5 was skipped"},
        }
        with patch("mucho.rpc.urllib.request.urlopen", return_value=_response(payload)):
            self.assertIsNone(self.client.get_block(5))

    def test_slot_leader(self) -> None:
        payload = {"jsonrpc": "2.0", "id": 1, "result": ["Leader111"]}
        with patch("mucho.rpc.urllib.request.urlopen", return_value=_response(payload)) as mock_urlopen:
            self.assertEqual(self.client.get_slot_leader(10), "Leader111")
        self.assertEqual(self._sent(mock_urlopen)["params"], [10, 1])

    def test_invalid_json_is_malformed(self) -> None:
        resp = MagicMock()
        resp.read.return_value = b"<html>"
        resp.__enter__.return_value = resp
        with patch("mucho.rpc.urllib.request.urlopen", return_value=resp):
            with self.assertRaises(MalformedUpstreamData):
                self.client.get_genesis_hash()


if __name__ == "__main__":
    unittest.main()
