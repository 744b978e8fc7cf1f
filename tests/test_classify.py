import unittest

from solders.keypair import Keypair

from mucho.classify import (
    AddressTarget,
    BlockTarget,
    SignatureTarget,
    classify,
    is_address,
    is_signature,
)
from mucho.cluster import Cluster, Endpoint
from mucho.errors import UnrecognizedInput, UnsupportedHost, UnsupportedPath, UrlNotAllowed

ADDRESS = "11111111111111111111111111111111"


class ClassifyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.signature = str(Keypair().sign_message(b"mucho"))

    def test_address(self) -> None:
        result = classify(ADDRESS)
        self.assertEqual(result.target, AddressTarget(ADDRESS))
        self.assertIsNone(result.cluster)

    def test_signature(self) -> None:
        self.assertTrue(is_signature(self.signature))
        self.assertFalse(is_address(self.signature))
        self.assertEqual(classify(self.signature).target, SignatureTarget(self.signature))

    def test_block_numbers(self) -> None:
        self.assertEqual(classify("1,234,567", separator=",").target, BlockTarget(1234567))
        self.assertEqual(classify("1.234.567", separator=".").target, BlockTarget(1234567))
        self.assertEqual(classify(" 42 ", separator=",").target, BlockTarget(42))

    def test_unrecognized(self) -> None:
        for value in ["hello world", "12-34", "0xdeadbeef"]:
            with self.subTest(value=value):
                with self.assertRaises(UnrecognizedInput):
                    classify(value, separator=",")


class ExplorerUrlTests(unittest.TestCase):
    def test_tx_with_testnet(self) -> None:
        result = classify("https://explorer.solana.com/tx/ABC123?cluster=testnet")
        self.assertEqual(result.target, SignatureTarget("ABC123"))
        self.assertIs(result.cluster, Cluster.TESTNET)

    def test_transaction_path_and_default_cluster(self) -> None:
        result = classify("https://explorer.solana.com/transaction/ABC123")
        self.assertEqual(result.target, SignatureTarget("ABC123"))
        self.assertIs(result.cluster, Cluster.MAINNET_BETA)

    def test_address_with_custom_cluster(self) -> None:
        result = classify(
            f"https://explorer.solana.com/address/{ADDRESS}?cluster=custom&customUrl=http%3A%2F%2Flocalhost%3A8899"
        )
        self.assertEqual(result.target, AddressTarget(ADDRESS))
        self.assertEqual(result.cluster, Endpoint("http://localhost:8899/"))

    def test_custom_without_url_is_localhost(self) -> None:
        result = classify(f"https://explorer.solana.com/address/{ADDRESS}?cluster=custom")
        self.assertIs(result.cluster, Cluster.LOCALHOST)

    def test_block_path(self) -> None:
        result = classify("https://explorer.solana.com/block/1234?cluster=devnet", separator=",")
        self.assertEqual(result.target, BlockTarget(1234))
        self.assertIs(result.cluster, Cluster.DEVNET)

    def test_unsupported_host(self) -> None:
        with self.assertRaises(UnsupportedHost):
            classify("https://solscan.io/tx/ABC123")

    def test_unsupported_path(self) -> None:
        for url in [
            "https://explorer.solana.com/",
            "https://explorer.solana.com/epoch/500",
            "https://explorer.solana.com/block/abc",
        ]:
            with self.subTest(url=url):
                with self.assertRaises(UnsupportedPath):
                    classify(url, separator=",")

    def test_cluster_param_must_be_moniker(self) -> None:
        with self.assertRaises(UrlNotAllowed):
            classify("https://explorer.solana.com/tx/ABC?cluster=https://rpc.example.com")


if __name__ == "__main__":
    unittest.main()
