"""Unit tests for network reconciliation."""

from __future__ import annotations

import pytest

from odl.chain.network import NativeCurrency, NetworkDescriptor, ensure_network
from odl.errors import RpcError

NETWORK = NetworkDescriptor(
    chain_id=1337,
    name="Local Devnet",
    native_currency=NativeCurrency(name="Dev Ether", symbol="DEV", decimals=18),
    rpc_urls=("http://127.0.0.1:8545",),
)

SWITCH = "wallet_switchEthereumChain"
ADD = "wallet_addEthereumChain"


class WalletRejected(Exception):
    """Provider-specific error type carrying an EIP-1193 code."""

    code = 4001


class TestAlreadyOnNetwork:
    def test_only_reads_chain_id(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(chain_id=1337)
        ensure_network(wallet, NETWORK)
        assert wallet.methods == ["eth_chainId"]


class TestSwitch:
    def test_successful_switch_does_not_add(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(chain_id=1)
        ensure_network(wallet, NETWORK)
        assert wallet.methods == ["eth_chainId", SWITCH]
        assert wallet.calls[1][1] == [{"chainId": "0x539"}]
        assert wallet.chain_id == 1337

    def test_user_rejection_never_adds(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(
            chain_id=1, switch_errors=[RpcError(4001, "User rejected the request.")]
        )
        with pytest.raises(RpcError) as excinfo:
            ensure_network(wallet, NETWORK)
        assert excinfo.value.code == 4001
        assert ADD not in wallet.methods
        assert wallet.methods.count(SWITCH) == 1

    def test_rejection_from_foreign_error_type(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(chain_id=1, switch_errors=[WalletRejected("declined")])
        with pytest.raises(WalletRejected):
            ensure_network(wallet, NETWORK)
        assert ADD not in wallet.methods


class TestAddThenSwitch:
    def test_unknown_chain_is_added_then_switched(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(
            chain_id=1, switch_errors=[RpcError(4902, "Unrecognized chain ID"), None]
        )
        ensure_network(wallet, NETWORK)
        assert wallet.methods == ["eth_chainId", SWITCH, ADD, SWITCH]
        assert wallet.calls[2][1] == [
            {
                "chainId": "0x539",
                "chainName": "Local Devnet",
                "nativeCurrency": {"name": "Dev Ether", "symbol": "DEV", "decimals": 18},
                "rpcUrls": ["http://127.0.0.1:8545"],
            }
        ]

    def test_error_without_code_takes_fallback(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(chain_id=1, switch_errors=[RuntimeError("boom"), None])
        ensure_network(wallet, NETWORK)
        assert wallet.methods.count(ADD) == 1
        assert wallet.methods.count(SWITCH) == 2

    def test_second_switch_failure_is_terminal(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(
            chain_id=1,
            switch_errors=[RpcError(4902, "Unrecognized chain ID"), RpcError(-32603, "still no")],
        )
        with pytest.raises(RpcError) as excinfo:
            ensure_network(wallet, NETWORK)
        assert excinfo.value.code == -32603
        assert wallet.methods == ["eth_chainId", SWITCH, ADD, SWITCH]

    def test_add_failure_skips_second_switch(self, fake_wallet_cls) -> None:
        wallet = fake_wallet_cls(
            chain_id=1,
            switch_errors=[RpcError(4902, "Unrecognized chain ID")],
            add_error=RpcError(-32602, "bad params"),
        )
        with pytest.raises(RpcError):
            ensure_network(wallet, NETWORK)
        assert wallet.methods == ["eth_chainId", SWITCH, ADD]


class TestDescriptor:
    def test_defaults_target_adafel_testnet(self) -> None:
        network = NetworkDescriptor()
        assert network.chain_id == 3995596960668836
        assert network.native_currency.symbol == "ADFL"
        assert network.rpc_url == "https://testnet-rpc.adafel.com"

    def test_descriptor_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            NETWORK.chain_id = 5  # type: ignore[misc]
