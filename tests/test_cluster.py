import unittest

from mucho.cluster import (
    Cluster,
    Endpoint,
    RpcTarget,
    classify_url,
    cluster_from_genesis_hash,
    default_endpoint,
    detect_cluster_strict,
    parse_url_option,
    resolve,
    resolve_moniker,
    target_for,
)
from mucho.errors import InvalidClusterInput, UnknownHost, UnparseableUrl, UrlNotAllowed


class ResolveTests(unittest.TestCase):
    def test_monikers_and_abbreviations(self) -> None:
        cases = {
            Cluster.MAINNET_BETA: ["m", "mainnet", "mainnet-beta", "MAINNET", "Mainnet-Beta"],
            Cluster.DEVNET: ["d", "devnet", "DevNet", " devnet "],
            Cluster.TESTNET: ["t", "testnet", "TESTNET"],
            Cluster.LOCALHOST: ["l", "local", "localnet", "localhost", "LocalHost"],
        }
        for cluster, values in cases.items():
            for value in values:
                with self.subTest(value=value):
                    self.assertIs(resolve(value), cluster)

    def test_unknown_moniker_fails(self) -> None:
        for value in ["", "main", "dev-net", "solana", "x"]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidClusterInput):
                    resolve(value)

    def test_url_is_kept_as_endpoint(self) -> None:
        ref = resolve("https://rpc.example.com/path?api-key=abc")
        self.assertEqual(ref, Endpoint("https://rpc.example.com/path?api-key=abc"))

    def test_url_without_path_gets_trailing_slash(self) -> None:
        self.assertEqual(resolve("http://127.0.0.1:8899"), Endpoint("http://127.0.0.1:8899/"))

    def test_url_not_allowed(self) -> None:
        for value in ["https://api.devnet.solana.com", "http://localhost:8899", "wss://rpc.example.com"]:
            with self.subTest(value=value):
                with self.assertRaises(UrlNotAllowed):
                    resolve(value, allow_url=False)

    def test_bad_port_is_unparseable(self) -> None:
        with self.assertRaises(UnparseableUrl):
            resolve("http://localhost:notaport")

    def test_resolve_moniker_rejects_urls(self) -> None:
        self.assertIs(resolve_moniker("t"), Cluster.TESTNET)
        with self.assertRaises(UrlNotAllowed):
            resolve_moniker("https://api.testnet.solana.com")

    def test_devnet_end_to_end(self) -> None:
        self.assertEqual(default_endpoint(resolve("devnet")), "https://api.devnet.solana.com")


class ClassifyUrlTests(unittest.TestCase):
    def test_public_endpoints_round_trip(self) -> None:
        for cluster in (Cluster.MAINNET_BETA, Cluster.DEVNET, Cluster.TESTNET):
            with self.subTest(cluster=cluster):
                endpoint = default_endpoint(cluster)
                self.assertEqual(default_endpoint(classify_url(endpoint)), endpoint)

    def test_local_hosts(self) -> None:
        for url in ["http://localhost:8899", "http://127.0.0.1:9000/", "http://0.0.0.0:8899"]:
            with self.subTest(url=url):
                self.assertIs(classify_url(url), Cluster.LOCALHOST)

    def test_unknown_host(self) -> None:
        with self.assertRaises(UnknownHost):
            classify_url("https://rpc.helius.xyz/?api-key=1")

    def test_unparseable(self) -> None:
        with self.assertRaises(UnparseableUrl):
            classify_url("not a url")


class GenesisHashTests(unittest.TestCase):
    def test_known_hashes(self) -> None:
        self.assertIs(
            cluster_from_genesis_hash("5eykt4UsFv8P8NJdTREpY1vzqKqZKvdpKuc147dw2N9d"),
            Cluster.MAINNET_BETA,
        )
        self.assertIs(
            cluster_from_genesis_hash("EtWTRABZaYq6iMfeYKouRu166VU2xqa1wcaWoxPkrZBG"),
            Cluster.DEVNET,
        )
        self.assertIs(
            cluster_from_genesis_hash("4uhcVJyU9pJkvQyS88uRDiswHXSCkY3zQawwpjk2NsNY"),
            Cluster.TESTNET,
        )

    def test_unknown_hash_is_localhost(self) -> None:
        self.assertIs(cluster_from_genesis_hash("SomeOtherHash"), Cluster.LOCALHOST)

    def test_strict_detection_keeps_unknown(self) -> None:
        self.assertIsNone(detect_cluster_strict("SomeOtherHash"))


class UrlOptionTests(unittest.TestCase):
    def test_flag_wins(self) -> None:
        target = parse_url_option("t", "https://api.devnet.solana.com")
        self.assertEqual(target, RpcTarget(url="https://api.testnet.solana.com", cluster=Cluster.TESTNET))

    def test_first_fallback_used(self) -> None:
        target = parse_url_option(None, None, "https://api.devnet.solana.com")
        self.assertIs(target.cluster, Cluster.DEVNET)
        self.assertEqual(target.url, "https://api.devnet.solana.com/")

    def test_defaults_to_mainnet(self) -> None:
        target = parse_url_option(None, None, None)
        self.assertIs(target.cluster, Cluster.MAINNET_BETA)

    def test_custom_url_is_not_aliased(self) -> None:
        target = target_for(Endpoint("https://rpc.example.com/"))
        self.assertIsNone(target.cluster)
        self.assertEqual(target.ref, Endpoint("https://rpc.example.com/"))

    def test_local_url_keeps_its_port(self) -> None:
        target = parse_url_option("http://127.0.0.1:9000")
        self.assertIs(target.cluster, Cluster.LOCALHOST)
        self.assertEqual(target.ref, Endpoint("http://127.0.0.1:9000/"))

    def test_public_url_links_by_moniker(self) -> None:
        self.assertIs(parse_url_option("https://api.devnet.solana.com").ref, Cluster.DEVNET)


if __name__ == "__main__":
    unittest.main()
