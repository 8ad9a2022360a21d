"""Configuration constants for election-deployer."""

from decimal import Decimal

# Environment keys recognized by the deployer
PRIVATE_KEY_ENV = "PRIVATE_KEY"
API_KEY_ENV = "ALCHEMY_API_KEY"
RPC_URL_ENV = "RPC_URL"
DEPLOYMENTS_DIR_ENV = "DEPLOYMENTS_DIR"
ARTIFACTS_DIR_ENV = "ARTIFACTS_DIR"

RECOGNIZED_ENV_KEYS = (
    PRIVATE_KEY_ENV,
    API_KEY_ENV,
    RPC_URL_ENV,
    DEPLOYMENTS_DIR_ENV,
    ARTIFACTS_DIR_ENV,
)

# Check order matters: credential before API access
REQUIRED_CREDENTIAL_KEYS = (PRIVATE_KEY_ENV, API_KEY_ENV)

# Sample values shipped in .env.example and the README
PLACEHOLDER_VALUES = frozenset(
    {
        "your_owner_private_key_here",
        "your_private_key_here",
        "your_alchemy_api_key_here",
        "REQUIRED",
    }
)

LOCAL_RPC_URL = "http://127.0.0.1:8545"
LOCAL_CHAIN_ID = 1337

DEFAULT_MIN_BALANCE = Decimal("0.01")  # ETH

# Static network table, keyed by the name passed on the command line
NETWORK_PROFILES = {
    "hardhat": {
        "chain_id": LOCAL_CHAIN_ID,
        "requires_credentials": False,
        "min_balance": Decimal("0"),
        "faucet_hint": None,
        "rpc_url": LOCAL_RPC_URL,
    },
    "localhost": {
        "chain_id": LOCAL_CHAIN_ID,
        "requires_credentials": False,
        "min_balance": Decimal("0"),
        "faucet_hint": None,
        "rpc_url": LOCAL_RPC_URL,
    },
    "sepolia": {
        "chain_id": 11155111,
        "requires_credentials": True,
        "min_balance": DEFAULT_MIN_BALANCE,
        "faucet_hint": "https://sepoliafaucet.com/",
        "rpc_url": "https://eth-sepolia.g.alchemy.com/v2/{api_key}",
    },
    "goerli": {
        "chain_id": 5,
        "requires_credentials": True,
        "min_balance": DEFAULT_MIN_BALANCE,
        "faucet_hint": "https://goerlifaucet.com/",
        "rpc_url": "https://eth-goerli.g.alchemy.com/v2/{api_key}",
    },
    "mainnet": {
        "chain_id": 1,
        "requires_credentials": True,
        "min_balance": DEFAULT_MIN_BALANCE,
        "faucet_hint": None,
        "rpc_url": "https://eth-mainnet.g.alchemy.com/v2/{api_key}",
    },
}

# Canonical election suite parameters
VOTING_TOKEN = "VotingToken"
VOTER_REGISTRY = "VoterRegistry"
ELECTION_FACTORY = "ElectionFactory"

DEFAULT_TOKEN_NAME = "Voting Token"
DEFAULT_TOKEN_SYMBOL = "VOTE"
DEFAULT_MIN_VOTING_AGE = 18

# Contracts whose ABIs are shared with the backend and frontend
ABI_EXPORT_CONTRACTS = (VOTING_TOKEN, VOTER_REGISTRY, "Election", ELECTION_FACTORY)

WEI_PER_ETHER = Decimal(10) ** 18
