"""Explorer link builder."""

from __future__ import annotations

from urllib.parse import urlencode

from .cluster import Cluster, ClusterRef, Endpoint, default_endpoint
from .constants import EXPLORER_URL


def _cluster_params(ref: ClusterRef) -> dict[str, str]:
    if isinstance(ref, Endpoint):
        return {"cluster": "custom", "customUrl": ref.url}
    cluster = Cluster(ref)
    if cluster is Cluster.MAINNET_BETA:
        return {}
    if cluster is Cluster.LOCALHOST:
        return {"cluster": "custom", "customUrl": default_endpoint(Cluster.LOCALHOST)}
    return {"cluster": cluster.value}


def build_link(
    ref: ClusterRef,
    *,
    address: str | None = None,
    transaction: str | None = None,
    block: int | str | None = None,
) -> str:
    """Build an explorer url for at most one of an address, transaction or block."""
    given = [v for v in (address, transaction, block) if v is not None]
    if len(given) > 1:
        raise ValueError("Only one of address, transaction or block may be linked")

    path = ""
    if address is not None:
        path = f"/address/{address}"
    elif transaction is not None:
        path = f"/tx/{transaction}"
    elif block is not None:
        path = f"/block/{block}"

    params = _cluster_params(ref)
    query = f"?{urlencode(params)}" if params else ""
    return f"{EXPLORER_URL}{path}{query}"


def link_for_entity(ref: ClusterRef, kind: str, value: str | int) -> str:
    if kind == "address":
        return build_link(ref, address=str(value))
    if kind in {"tx", "transaction", "signature"}:
        return build_link(ref, transaction=str(value))
    if kind == "block":
        return build_link(ref, block=value)
    raise ValueError(f"Unknown explorer entity kind: {kind}")
