"""Shared fakes: a recording wallet and a recording contract."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from odl.errors import RpcError

TX_HASH = "0x" + "ab" * 32


class FakeWallet:
    """EIP-1193 style wallet that records every request.

    ``switch_errors`` is consumed one entry per switch attempt; ``None``
    entries succeed.
    """

    def __init__(
        self,
        chain_id: int = 1,
        accounts: Optional[list[str]] = None,
        switch_errors: Optional[list[Optional[BaseException]]] = None,
        add_error: Optional[BaseException] = None,
    ) -> None:
        self.chain_id = chain_id
        self.accounts = list(accounts or [])
        self.switch_errors = list(switch_errors or [])
        self.add_error = add_error
        self.calls: list[tuple[str, Any]] = []

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def request(self, method: str, params: Optional[list] = None) -> Any:
        self.calls.append((method, params))
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "eth_accounts":
            return list(self.accounts)
        if method == "wallet_switchEthereumChain":
            if self.switch_errors:
                error = self.switch_errors.pop(0)
                if error is not None:
                    raise error
            self.chain_id = int(params[0]["chainId"], 16)
            return None
        if method == "wallet_addEthereumChain":
            if self.add_error is not None:
                raise self.add_error
            return None
        if method == "eth_sendTransaction":
            return TX_HASH
        raise RpcError(-32601, f"Method not found: {method}")


class FakeContract:
    """Stands in for OpenDataLibraryContract; records (name, args)."""

    def __init__(self, reads: Optional[dict[str, Any]] = None) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.reads = reads or {}

    def _record(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        return self.reads.get(name, TX_HASH)

    def add_on_chain_data(self, *args):
        return self._record("add_on_chain_data", *args)

    def add_schema(self, *args):
        return self._record("add_schema", *args)

    def add_user(self, *args):
        return self._record("add_user", *args)

    def add_analytics(self, *args):
        return self._record("add_analytics", *args)

    def update_analytics(self, *args):
        return self._record("update_analytics", *args)

    def train_off_chain_data(self, *args):
        return self._record("train_off_chain_data", *args)

    def train_cid_data(self, *args):
        return self._record("train_cid_data", *args)

    def predict_onchain_model(self, *args):
        return self._record("predict_onchain_model", *args)

    def extract_cid_data(self, *args):
        return self._record("extract_cid_data", *args)

    def get_all_schemas(self):
        return self._record("get_all_schemas")

    def get_analytics_data_by_schema_name(self, *args):
        return self._record("get_analytics_data_by_schema_name", *args)

    def address_to_id(self, *args):
        return self._record("address_to_id", *args)

    def id_to_address(self, *args):
        return self._record("id_to_address", *args)

    def consumer_credits(self, *args):
        return self._record("consumer_credits", *args)

    def wait_for_receipt(self, tx_hash, confirmations, timeout=None):
        self.calls.append(("wait_for_receipt", (tx_hash, confirmations, timeout)))
        return {"transactionHash": tx_hash, "status": "0x1"}


@pytest.fixture()
def fake_wallet_cls() -> type[FakeWallet]:
    return FakeWallet


@pytest.fixture()
def fake_contract() -> FakeContract:
    return FakeContract()
