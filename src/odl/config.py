"""
Client configuration.

Every option is optional. Values not given explicitly fall back to the
environment (after loading ~/.odl/.env) and then to the Adafel testnet
defaults.

Environment variables:
    ODL_RPC_URL            RPC endpoint
    ODL_CHAIN_ID           chain id, decimal or 0x-hex
    PRIVATE_KEY            local signing key (hex, 0x optional)
    PINATA_API_KEY         upload service key
    PINATA_SECRET_API_KEY  upload service secret
    ODL_CONTRACT_ADDRESS   contract address
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account.signers.local import LocalAccount

from .chain.network import DEFAULT_CHAIN_ID, DEFAULT_RPC_URL, NetworkDescriptor
from .contract import DEFAULT_CONTRACT_ADDRESS
from .errors import ConfigError
from .identity import eth as identity_eth


def _parse_chain_id(value: str) -> int:
    """Decimal or 0x-prefixed hex chain id."""
    text = value.strip()
    if "_" not in text:
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            pass
    raise ConfigError(f"ODL_CHAIN_ID must be a decimal or 0x-hex integer, got {value!r}")


@dataclass(frozen=True)
class ClientOptions:
    rpc_url: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    account: Optional[LocalAccount] = field(default=None, repr=False)
    chain_id: Optional[int] = None
    pinata_api_key: Optional[str] = field(default=None, repr=False)
    pinata_secret_api_key: Optional[str] = field(default=None, repr=False)
    contract_address: Optional[str] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "ClientOptions":
        env_path = env_path or identity_eth.ODL_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        chain_id = os.environ.get("ODL_CHAIN_ID")
        return cls(
            rpc_url=os.environ.get("ODL_RPC_URL") or None,
            private_key=os.environ.get("PRIVATE_KEY") or None,
            chain_id=_parse_chain_id(chain_id) if chain_id else None,
            pinata_api_key=os.environ.get("PINATA_API_KEY") or None,
            pinata_secret_api_key=os.environ.get("PINATA_SECRET_API_KEY") or None,
            contract_address=os.environ.get("ODL_CONTRACT_ADDRESS") or None,
        )

    @property
    def resolved_rpc_url(self) -> str:
        return self.rpc_url or DEFAULT_RPC_URL

    @property
    def resolved_contract_address(self) -> str:
        return self.contract_address or DEFAULT_CONTRACT_ADDRESS

    def signer(self) -> Optional[LocalAccount]:
        """The local signing account, if one was configured."""
        if self.account is not None:
            return self.account
        if self.private_key:
            return identity_eth.get_account(self.private_key)
        return None

    def network(self) -> NetworkDescriptor:
        return NetworkDescriptor(
            chain_id=self.chain_id if self.chain_id is not None else DEFAULT_CHAIN_ID,
            rpc_urls=(self.resolved_rpc_url,),
        )
