# trusted_hint/constants.py

# EIP-712 domain name the registry contract signs under
REGISTRY_NAME = "TrustedHintRegistry"
REGISTRY_ABI_FILE = "TrustedHintRegistry.json"

DEPLOYMENT_TYPE_PROXY = "proxy"

ZERO_BYTES32 = "0x" + "00" * 32
UINT256_MAX = 2**256 - 1

# client labels used in error text
WALLET_CLIENT = "WalletClient"
META_TRANSACTION_WALLET_CLIENT = "MetaTransactionWalletClient"
READ_CLIENT = "WalletClient or ReadClient"

# environment
ENV_RPC_URL = "TRUSTED_HINT_RPC_URL"
ENV_CHAIN_ID = "TRUSTED_HINT_CHAIN_ID"
ENV_PRIVATE_KEY = "TRUSTED_HINT_PRIVATE_KEY"
ENV_META_PRIVATE_KEY = "TRUSTED_HINT_META_PRIVATE_KEY"
ENV_REGISTRY_ADDRESS = "TRUSTED_HINT_REGISTRY_ADDRESS"
ENV_DEPLOYMENTS = "TRUSTED_HINT_DEPLOYMENTS"
ENV_WAIT_FOR_RECEIPT = "TRUSTED_HINT_WAIT_FOR_RECEIPT"
ENV_LOG_LEVEL = "TRUSTED_HINT_LOG_LEVEL"
ENV_LOG_FILE = "TRUSTED_HINT_LOG_FILE"

DEPLOYMENTS_FETCH_TIMEOUT = 5
