__all__ = [
    # Client
    "OpenDataLibrary",
    "ClientOptions",
    # Contract
    "Category",
    "ModelFamily",
    "OpenDataLibraryContract",
    "DEFAULT_CONTRACT_ADDRESS",
    # Chain
    "NativeCurrency",
    "NetworkDescriptor",
    "JsonRpcProvider",
    "Transport",
    "WalletProvider",
    "ensure_network",
    "to_bytes32",
    # Accounts
    "AccountRef",
    "generate_eoa",
    "get_address",
    "load_private_key",
    "resolve_account",
    # Data
    "normalize",
    "extract_upload_payload",
    "cid_to_hex",
    "ContentStore",
    "LocalDirStore",
    "PinataStore",
    # Errors
    "ODLError",
    "RpcError",
    "AccountUnavailableError",
    "TabularParseError",
    "ProjectionError",
    "TabularValueError",
    "CidFormatError",
    "EncodingError",
    "UploadError",
    "TransactionTimeoutError",
    "ConfigError",
]

from .chain.encoding import to_bytes32
from .chain.network import NativeCurrency, NetworkDescriptor, ensure_network
from .chain.rpc import JsonRpcProvider
from .chain.wallet import Transport, WalletProvider
from .client import OpenDataLibrary
from .config import ClientOptions
from .contract import DEFAULT_CONTRACT_ADDRESS, Category, ModelFamily, OpenDataLibraryContract
from .data.cid import cid_to_hex
from .data.storage import ContentStore, LocalDirStore, PinataStore
from .data.tabular import extract_upload_payload, normalize
from .errors import (
    AccountUnavailableError,
    CidFormatError,
    ConfigError,
    EncodingError,
    ODLError,
    ProjectionError,
    RpcError,
    TabularParseError,
    TabularValueError,
    TransactionTimeoutError,
    UploadError,
)
from .identity.eth import AccountRef, generate_eoa, get_address, load_private_key, resolve_account
