"""
Transaction Builder - Encode, sign, and send contract calls.

Local accounts sign with eth-account and send raw transactions through the
RPC node. Wallet accounts hand an unsigned transaction to the wallet via
eth_sendTransaction and let it sign.
"""

from __future__ import annotations

import time
from typing import Any, Optional

import structlog
from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..errors import RpcError, TransactionTimeoutError
from ..identity.eth import AccountRef
from ..utils import hex_to_int, listify, strip_0x
from .abi import find_function, input_types, is_read_only, output_types
from .network import NetworkDescriptor
from .rpc import (
    estimate_gas,
    get_block_number,
    get_gas_price,
    get_nonce,
    get_transaction_receipt,
    send_raw_transaction,
)

logger = structlog.get_logger()

DEFAULT_GAS_LIMIT = 500_000
DEFAULT_CONFIRMATIONS = 3
METHOD_NOT_FOUND = -32601


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def encode_call(abi: list, function_name: str, args: list) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = find_function(abi, function_name)
    types = input_types(func)
    sig = f"{function_name}({','.join(types)})"

    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    selector = keccak(sig.encode("utf-8"))[:4]

    encoded_args = encode(types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the single value for one
        output, otherwise a list of values. Arrays come back as lists.
    """
    func = find_function(abi, function_name)
    types = output_types(func)
    if not types:
        return None

    raw = bytes.fromhex(strip_0x(data))
    decoded = listify(decode(types, raw))

    if len(decoded) == 1:
        return decoded[0]
    return decoded


class ContractGateway:
    """
    Reads and writes against one deployed contract.

    Args:
        address: Contract address
        abi: Contract ABI
        rpc: JSON-RPC provider used for reads, nonces, gas and receipts
        wallet: Provider that submits wallet-signed transactions
        network: Network the client is bound to (chain id for signing)
    """

    def __init__(
        self,
        address: str,
        abi: list,
        rpc: Any,
        wallet: Any,
        network: NetworkDescriptor,
    ) -> None:
        self.address = to_checksum_address(address)
        self.abi = abi
        self.rpc = rpc
        self.wallet = wallet
        self.network = network

    def read(self, function_name: str, args: Optional[list] = None) -> Any:
        """Call a view function (eth_call) and decode its result.

        Raises:
            ValueError: If the function changes state; use write()
        """
        if not is_read_only(find_function(self.abi, function_name)):
            raise ValueError(f"{function_name} is not a view function; use write()")
        calldata = encode_call(self.abi, function_name, args or [])
        result = self.rpc.request(
            "eth_call", [{"to": self.address, "data": calldata}, "latest"]
        )
        if result is None or result == "0x":
            return None
        return decode_result(self.abi, function_name, result)

    def write(
        self,
        function_name: str,
        args: list,
        account: AccountRef,
        gas_limit: Optional[int] = None,
    ) -> str:
        """
        Submit a state-changing call.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        calldata = encode_call(self.abi, function_name, args)
        if account.is_local:
            tx_hash = self._send_signed(calldata, account, gas_limit)
        else:
            tx: dict[str, Any] = {
                "from": account.address,
                "to": self.address,
                "data": calldata,
            }
            if gas_limit is not None:
                tx["gas"] = hex(gas_limit)
            tx_hash = self.wallet.request("eth_sendTransaction", [tx])

        logger.info(
            "transaction_submitted",
            function=function_name,
            sender=account.address,
            tx_hash=tx_hash,
        )
        return tx_hash

    def build_transaction(
        self,
        calldata: str,
        account: AccountRef,
        gas_limit: Optional[int] = None,
    ) -> dict:
        """Build an unsigned legacy transaction for a local account.

        A failing gas estimate (e.g. the call reverts) is raised here, before
        anything is signed. Only nodes without eth_estimateGas get the
        default gas limit.
        """
        if gas_limit is None:
            try:
                gas_limit = estimate_gas(
                    self.rpc,
                    {"from": account.address, "to": self.address, "data": calldata},
                )
            except RpcError as exc:
                if exc.code != METHOD_NOT_FOUND:
                    raise
                logger.warning("gas_estimate_unsupported", default=DEFAULT_GAS_LIMIT)
                gas_limit = DEFAULT_GAS_LIMIT

        return {
            "to": self.address,
            "data": calldata,
            "value": 0,
            "nonce": get_nonce(self.rpc, account.address),
            "gas": gas_limit,
            "gasPrice": get_gas_price(self.rpc),
            "chainId": self.network.chain_id,
        }

    def _send_signed(
        self,
        calldata: str,
        account: AccountRef,
        gas_limit: Optional[int],
    ) -> str:
        tx = self.build_transaction(calldata, account, gas_limit)
        signed = account.signer.sign_transaction(tx)
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        return send_raw_transaction(self.rpc, raw_tx)

    def wait_for_receipt(
        self,
        tx_hash: str,
        confirmations: int = DEFAULT_CONFIRMATIONS,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait until a transaction is mined and buried under enough blocks.

        The block containing the transaction counts as the first
        confirmation.

        Raises:
            TransactionTimeoutError: If not confirmed within ``timeout``
        """
        start = time.monotonic()
        while True:
            receipt = get_transaction_receipt(self.rpc, tx_hash)
            if receipt is not None and receipt.get("blockNumber") is not None:
                mined_in = hex_to_int(receipt["blockNumber"])
                depth = get_block_number(self.rpc) - mined_in + 1
                if depth >= confirmations:
                    logger.info(
                        "transaction_confirmed",
                        tx_hash=tx_hash,
                        block=mined_in,
                        confirmations=depth,
                    )
                    return receipt
            if time.monotonic() - start >= timeout:
                break
            time.sleep(poll_interval)

        raise TransactionTimeoutError(
            f"Transaction {tx_hash} not confirmed with {confirmations} "
            f"confirmations within {timeout}s"
        )
