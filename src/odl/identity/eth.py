"""
Account handling for the Open Data Library client.

An account is either a locally held secp256k1 key (signs transactions
itself) or an address exposed by a connected wallet (the wallet signs).

Keys are stored in ~/.odl/.env as PRIVATE_KEY (hex format).
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog
from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import AccountUnavailableError
from ..utils import ensure_0x

if TYPE_CHECKING:
    from ..chain.wallet import WalletProvider

logger = structlog.get_logger()

# Default config directory
ODL_DIR = Path.home() / ".odl"
ODL_ENV = ODL_DIR / ".env"


@dataclass(frozen=True)
class AccountRef:
    """The account a call is issued from.

    ``signer`` is set only for local keys; wallet accounts carry the
    address alone and rely on the wallet to sign.
    """

    address: str
    signer: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.signer is not None

    @classmethod
    def from_signer(cls, signer: LocalAccount) -> "AccountRef":
        return cls(address=signer.address, signer=signer)


def generate_eoa() -> tuple[str, str]:
    """
    Generate a new secp256k1 keypair.

    Returns:
        Tuple of (private_key_hex, address)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key to .env file, keeping any other entries.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.odl/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or ODL_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing["PRIVATE_KEY"] = private_key

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or ODL_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'odl genesis' or set "
            f"PRIVATE_KEY in {env_path}"
        )

    return ensure_0x(private_key)


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: hex private key, with or without 0x.
                     If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(ensure_0x(private_key))


def get_address(private_key: Optional[str] = None) -> str:
    return get_account(private_key).address


def resolve_account(
    signer: Optional[LocalAccount],
    wallet: "WalletProvider",
) -> AccountRef:
    """
    Resolve the account a call is issued from.

    A bound local signer always wins, whatever the wallet reports.
    Otherwise the wallet is asked for its addresses on every call and
    the first one is used.

    Raises:
        AccountUnavailableError: If the wallet exposes no address
    """
    if signer is not None:
        return AccountRef.from_signer(signer)

    addresses = wallet.request("eth_accounts", [])
    if not addresses:
        raise AccountUnavailableError(
            "Wallet exposes no accounts. Unlock the wallet or pass a private key."
        )
    logger.debug("account_resolved", address=addresses[0], source="wallet")
    return AccountRef(address=addresses[0])
