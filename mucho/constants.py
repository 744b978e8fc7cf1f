"""mucho constants and well-known addresses."""

CLUSTER_MAINNET = "mainnet-beta"
CLUSTER_DEVNET = "devnet"
CLUSTER_TESTNET = "testnet"
CLUSTER_LOCALHOST = "localhost"

CLUSTER_MONIKERS = {
    "m": CLUSTER_MAINNET,
    "mainnet": CLUSTER_MAINNET,
    "mainnet-beta": CLUSTER_MAINNET,
    "d": CLUSTER_DEVNET,
    "devnet": CLUSTER_DEVNET,
    "t": CLUSTER_TESTNET,
    "testnet": CLUSTER_TESTNET,
    "l": CLUSTER_LOCALHOST,
    "local": CLUSTER_LOCALHOST,
    "localnet": CLUSTER_LOCALHOST,
    "localhost": CLUSTER_LOCALHOST,
}

CLUSTER_URLS: dict[str, str] = {
    CLUSTER_MAINNET: "https://api.mainnet-beta.solana.com",
    CLUSTER_DEVNET: "https://api.devnet.solana.com",
    CLUSTER_TESTNET: "https://api.testnet.solana.com",
    CLUSTER_LOCALHOST: "http://127.0.0.1:8899",
}

CLUSTER_HOSTS: dict[str, str] = {
    "api.mainnet-beta.solana.com": CLUSTER_MAINNET,
    "api.devnet.solana.com": CLUSTER_DEVNET,
    "api.testnet.solana.com": CLUSTER_TESTNET,
    "localhost": CLUSTER_LOCALHOST,
    "127.0.0.1": CLUSTER_LOCALHOST,
    "0.0.0.0": CLUSTER_LOCALHOST,
}

GENESIS_HASHES: dict[str, str] = {
    "5eykt4UsFv8P8NJdTREpY1vzqKqZKvdpKuc147dw2N9d": CLUSTER_MAINNET,
    "EtWTRABZaYq6iMfeYKouRu166VU2xqa1wcaWoxPkrZBG": CLUSTER_DEVNET,
    "4uhcVJyU9pJkvQyS88uRDiswHXSCkY3zQawwpjk2NsNY": CLUSTER_TESTNET,
}

RPC_URL_SCHEMES = {"http", "https", "ws", "wss"}

EXPLORER_HOST = "explorer.solana.com"
EXPLORER_URL = f"https://{EXPLORER_HOST}"

COMPUTE_BUDGET_PROGRAM_ID = "ComputeBudget111111111111111111111111111111"
VOTE_PROGRAM_ID = "Vote111111111111111111111111111111111111111"

# Compute budget instruction discriminators (first data byte).
CB_REQUEST_UNITS = 0
CB_REQUEST_HEAP_FRAME = 1
CB_SET_COMPUTE_UNIT_LIMIT = 2
CB_SET_COMPUTE_UNIT_PRICE = 3
CB_SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT = 4

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_UNITS_PER_INSTRUCTION = 200_000

DEFAULT_COMMITMENT = "confirmed"
ALLOWED_COMMITMENTS = {"processed", "confirmed", "finalized"}

# JSON-RPC error codes meaning the requested block is not available.
BLOCK_UNAVAILABLE_CODES = {-32004, -32007, -32009}
RETRYABLE_HTTP_CODES = {429, 500, 502, 503, 504}

DEFAULT_CONFIG_FILE = "Solana.toml"
DEFAULT_TEST_LEDGER_DIR = "test-ledger"
DEFAULT_ACCOUNTS_DIR = ".cache/accounts"
DEFAULT_VALIDATOR_RPC_PORT = 8899
