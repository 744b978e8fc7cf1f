"""Cluster moniker and RPC endpoint resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import SplitResult, urlsplit, urlunsplit

from .constants import (
    CLUSTER_HOSTS,
    CLUSTER_MONIKERS,
    CLUSTER_URLS,
    GENESIS_HASHES,
    RPC_URL_SCHEMES,
)
from .errors import InvalidClusterInput, UnknownHost, UnparseableUrl, UrlNotAllowed

log = logging.getLogger(__name__)


class Cluster(str, Enum):
    MAINNET_BETA = "mainnet-beta"
    DEVNET = "devnet"
    TESTNET = "testnet"
    LOCALHOST = "localhost"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Endpoint:
    """An RPC url not tied to a cluster moniker."""

    url: str

    def __str__(self) -> str:
        return self.url


ClusterRef = Union[Cluster, Endpoint]


@dataclass(frozen=True)
class RpcTarget:
    """A resolved RPC url and the cluster it belongs to (None for custom urls).

    Local targets keep their url in `ref` since a test validator may listen on any port.
    """

    url: str
    cluster: Optional[Cluster]

    @property
    def ref(self) -> ClusterRef:
        if self.cluster is None or self.cluster is Cluster.LOCALHOST:
            return Endpoint(self.url)
        return self.cluster


def _split_url(value: str) -> SplitResult | None:
    try:
        parts = urlsplit(value.strip())
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in RPC_URL_SCHEMES or not parts.hostname:
        return None
    return parts


def _looks_like_url(value: str) -> bool:
    head, sep, _ = value.strip().partition("://")
    return bool(sep) and head.lower() in RPC_URL_SCHEMES


def normalize_url(value: str) -> str:
    parts = _split_url(value)
    if parts is None:
        raise UnparseableUrl(f"Invalid RPC url provided: {value}")
    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc, path, parts.query, parts.fragment))


def resolve(value: str | Endpoint, allow_url: bool = True) -> ClusterRef:
    """Resolve a moniker, abbreviation or RPC url into a ClusterRef."""
    if isinstance(value, Endpoint):
        value = value.url
    if _looks_like_url(value):
        if not allow_url:
            raise UrlNotAllowed("RPC url not allowed. Please provide a moniker.")
        return Endpoint(normalize_url(value))

    moniker = CLUSTER_MONIKERS.get(value.strip().lower())
    if moniker is None:
        raise InvalidClusterInput(f"Invalid RPC url or moniker provided: {value}")
    return Cluster(moniker)


def resolve_moniker(value: str) -> Cluster:
    ref = resolve(value, allow_url=False)
    if not isinstance(ref, Cluster):
        raise InvalidClusterInput(f"Invalid cluster moniker provided: {value}")
    return ref


def classify_url(url: str | Endpoint) -> Cluster:
    """Determine the cluster of a known public (or local) RPC url."""
    text = url.url if isinstance(url, Endpoint) else url
    parts = _split_url(text)
    if parts is None:
        raise UnparseableUrl("Unable to parse RPC url")
    cluster = CLUSTER_HOSTS.get((parts.hostname or "").lower())
    if cluster is None:
        raise UnknownHost("Unable to determine moniker from RPC url")
    return Cluster(cluster)


def default_endpoint(cluster: Cluster) -> str:
    return CLUSTER_URLS[Cluster(cluster).value]


def cluster_from_genesis_hash(genesis_hash: str) -> Cluster:
    """Map a genesis hash to its cluster, treating any unknown hash as localhost."""
    cluster = detect_cluster_strict(genesis_hash)
    return cluster if cluster is not None else Cluster.LOCALHOST


def detect_cluster_strict(genesis_hash: str) -> Optional[Cluster]:
    cluster = GENESIS_HASHES.get(genesis_hash.strip())
    return Cluster(cluster) if cluster else None


def target_for(ref: ClusterRef) -> RpcTarget:
    if isinstance(ref, Cluster):
        return RpcTarget(url=default_endpoint(ref), cluster=ref)
    try:
        cluster: Optional[Cluster] = classify_url(ref.url)
    except UnknownHost:
        log.debug("treating %s as a custom rpc endpoint", ref.url)
        cluster = None
    return RpcTarget(url=ref.url, cluster=cluster)


def parse_url_option(value: str | None, *fallbacks: str | None) -> RpcTarget:
    """Resolve the `--url` flag, falling back to the first usable configured value."""
    for candidate in (value, *fallbacks):
        if candidate:
            return target_for(resolve(candidate))
    return target_for(Cluster.MAINNET_BETA)
