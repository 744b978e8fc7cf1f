"""Classify inspector input into an address, signature or block number."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import parse_qs, unquote, urlsplit

from solders.pubkey import Pubkey
from solders.signature import Signature

from .cluster import Cluster, ClusterRef, resolve
from .constants import EXPLORER_HOST
from .errors import UnparseableUrl, UnrecognizedInput, UnsupportedHost, UnsupportedPath
from .util import number_string_to_int

_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
_ADDRESS_PATH_RE = re.compile(r"^/address/([^/]+)/?", re.IGNORECASE)
_TX_PATH_RE = re.compile(r"^/(?:tx|transaction)/([^/]+)/?", re.IGNORECASE)
_BLOCK_PATH_RE = re.compile(r"^/block/([^/]+)/?", re.IGNORECASE)


@dataclass(frozen=True)
class AddressTarget:
    address: str


@dataclass(frozen=True)
class SignatureTarget:
    signature: str


@dataclass(frozen=True)
class BlockTarget:
    block: int


InspectionTarget = Union[AddressTarget, SignatureTarget, BlockTarget]


@dataclass(frozen=True)
class Classification:
    target: InspectionTarget
    # cluster selected by an explorer url, if the input was one
    cluster: Optional[ClusterRef] = None


def is_address(value: str) -> bool:
    try:
        Pubkey.from_string(value)
    except ValueError:
        return False
    return True


def is_signature(value: str) -> bool:
    try:
        Signature.from_string(value)
    except ValueError:
        return False
    return True


def _explorer_cluster(query: dict[str, list[str]]) -> ClusterRef:
    cluster = (query.get("cluster") or ["mainnet"])[0]
    if cluster.lower() == "custom":
        custom = (query.get("customUrl") or [None])[0]
        if custom:
            return resolve(custom)
        return Cluster.LOCALHOST
    return resolve(cluster, allow_url=False)


def parse_explorer_url(raw: str, separator: str | None = None) -> Classification:
    try:
        parts = urlsplit(raw.strip())
        hostname = (parts.hostname or "").lower()
    except ValueError as exc:
        raise UnparseableUrl("Unable to parse inspector input as valid URL") from exc
    if hostname != EXPLORER_HOST:
        raise UnsupportedHost(f"Only the https://{EXPLORER_HOST} explorer is supported")

    cluster = _explorer_cluster(parse_qs(parts.query))
    path = parts.path

    match = _ADDRESS_PATH_RE.match(path)
    if match:
        return Classification(AddressTarget(unquote(match.group(1))), cluster)
    match = _TX_PATH_RE.match(path)
    if match:
        return Classification(SignatureTarget(unquote(match.group(1))), cluster)
    match = _BLOCK_PATH_RE.match(path)
    if match:
        try:
            block = number_string_to_int(unquote(match.group(1)), separator)
        except ValueError as exc:
            raise UnsupportedPath(f"Invalid block number in explorer URL: {path}") from exc
        return Classification(BlockTarget(block), cluster)
    raise UnsupportedPath(f"Unsupported explorer URL: {path or '/'}")


def classify(raw: str, separator: str | None = None) -> Classification:
    """Classify free-form inspector input; `separator` overrides the locale grouping separator."""
    value = raw.strip()
    if _HTTP_RE.match(value):
        return parse_explorer_url(value, separator)
    if is_address(value):
        return Classification(AddressTarget(value))
    if is_signature(value):
        return Classification(SignatureTarget(value))
    try:
        return Classification(BlockTarget(number_string_to_int(value, separator)))
    except ValueError:
        pass
    raise UnrecognizedInput(f"Unable to determine the input type: {raw}")
