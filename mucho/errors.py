"""Error types raised by mucho."""

from __future__ import annotations


class MuchoError(ValueError):
    """Base class for recoverable, user-facing errors."""


class InvalidClusterInput(MuchoError):
    """Raised when a moniker does not name a known cluster."""


class UnparseableUrl(MuchoError):
    """Raised when an RPC url cannot be parsed."""


class UnknownHost(MuchoError):
    """Raised when an RPC url host does not belong to a known cluster."""


class UrlNotAllowed(MuchoError):
    """Raised when a url is given where only a moniker is accepted."""


class UnsupportedHost(MuchoError):
    """Raised when an explorer url points at an unsupported explorer."""


class UnsupportedPath(MuchoError):
    """Raised when an explorer url path does not name an entity."""


class UnrecognizedInput(MuchoError):
    """Raised when inspector input is not an address, signature or block."""


class ConfigError(MuchoError):
    """Raised when a config file exists but cannot be parsed."""


class EntityNotFound(MuchoError):
    """Raised when an account, transaction or block is absent on the cluster."""

    def __init__(self, kind: str, value: str, explorer_link: str | None = None) -> None:
        self.kind = kind
        self.value = value
        self.explorer_link = explorer_link
        message = f"{kind.capitalize()} not found: {value}"
        if explorer_link:
            message += f"\nTry viewing it on the explorer instead: {explorer_link}"
        super().__init__(message)


class MalformedUpstreamData(RuntimeError):
    """Raised when an RPC payload is structurally invalid."""


class RpcError(RuntimeError):
    """Raised when an RPC request fails after retries."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
