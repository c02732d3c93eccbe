"""
odl.client - Open Data Library Python client.

Wraps the Open Data Library contract (default deployment
0x91f78FBEB6c5C29981aFBAB1B20037213E1Ecbc7 on the Adafel testnet).

Every state-changing call resolves the sending account, makes sure the
wallet is on the client's network, encodes its arguments and submits.
Every public method raises ``ODLError`` on failure, with the underlying
exception kept on ``.cause``.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, Sequence, TypeVar

import structlog

from .chain.abi import open_data_library_abi
from .chain.encoding import encode_strings, from_bytes32, to_bytes32
from .chain.network import NetworkDescriptor, ensure_network
from .chain.rpc import JsonRpcProvider
from .chain.tx import DEFAULT_CONFIRMATIONS, ContractGateway
from .chain.wallet import Transport, WalletProvider, select_transport
from .config import ClientOptions
from .contract import Category, ModelFamily, OpenDataLibraryContract
from .data.cid import cid_to_hex
from .data.storage import ContentStore, PinataStore
from .data.tabular import extract_upload_payload, normalize
from .errors import ODLError
from .identity.eth import AccountRef, resolve_account

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


def _surface_errors(func: F) -> F:
    """Re-raise any failure as a generic ODLError carrying the cause."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            if type(exc) is ODLError:
                raise
            raise ODLError.wrap(exc) from exc

    return wrapper  # type: ignore[return-value]


class OpenDataLibrary:
    """
    Client for the Open Data Library contract.

    Args:
        options: Connection settings; defaults to the Adafel testnet.
        wallet: Connected wallet provider (``request(method, params)``).
            Ignored for signing when a local key is configured.
        contract: Contract interface; built from ``options`` if omitted.
        store: Content store for uploads; Pinata with the configured keys
            if omitted.
        rpc: JSON-RPC provider; built from ``options.rpc_url`` if omitted.

    Example::

        from odl import ClientOptions, OpenDataLibrary

        odl = OpenDataLibrary(ClientOptions(private_key=os.getenv("PRIVATE_KEY")))
        data, labels = odl.get_data_from_csv(csv_text, ["age", "income"], "score")
        tx_hash = odl.train_linear_regression_off_chain_data(data, labels, "score-v1")
        odl.wait_for_transaction(tx_hash)
    """

    def __init__(
        self,
        options: Optional[ClientOptions] = None,
        *,
        wallet: Optional[WalletProvider] = None,
        contract: Optional[OpenDataLibraryContract] = None,
        store: Optional[ContentStore] = None,
        rpc: Optional[Any] = None,
    ) -> None:
        self.options = options or ClientOptions()
        self._network = self.options.network()
        self._signer = self.options.signer()
        self.rpc = rpc or JsonRpcProvider(self.options.resolved_rpc_url)
        self.transport = select_transport(self._signer, wallet)
        self.wallet = wallet if self.transport is Transport.WALLET else self.rpc

        if contract is None:
            gateway = ContractGateway(
                address=self.options.resolved_contract_address,
                abi=open_data_library_abi(),
                rpc=self.rpc,
                wallet=self.wallet,
                network=self._network,
            )
            contract = OpenDataLibraryContract(gateway)
        self.contract = contract

        self.store = store or PinataStore(
            api_key=self.options.pinata_api_key or "",
            secret_api_key=self.options.pinata_secret_api_key or "",
        )
        logger.debug(
            "client_created",
            transport=self.transport.value,
            chain_id=self._network.chain_id,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "OpenDataLibrary":
        return cls(ClientOptions.from_env(), **kwargs)

    @property
    def network(self) -> NetworkDescriptor:
        return self._network

    # ── Account & network ─────────────────────────────────────────────────

    @_surface_errors
    def get_account(self) -> AccountRef:
        return resolve_account(self._signer, self.wallet)

    @_surface_errors
    def ensure_network(self) -> None:
        ensure_network(self.wallet, self._network)

    def _prepare(self) -> AccountRef:
        account = resolve_account(self._signer, self.wallet)
        ensure_network(self.wallet, self._network)
        return account

    # ── Data preparation ──────────────────────────────────────────────────

    @_surface_errors
    def get_data_from_csv(
        self,
        raw_text: str | bytes,
        input_columns: Sequence[str],
        label_column: str,
    ) -> tuple[list[list[int]], list[int]]:
        """Scaled input matrix and flat label vector from CSV text."""
        return normalize(raw_text, input_columns, label_column)

    @_surface_errors
    def upload_cid_data_to_ipfs(self, raw_text: str | bytes, name: Optional[str] = None) -> str:
        """Pin the whole scaled table and return its CID. No chain calls."""
        payload = extract_upload_payload(raw_text)
        return self.store.pin_json(payload, name=name)

    @_surface_errors
    def get_cid_bytes(self, cid: str) -> str:
        return cid_to_hex(cid)

    # ── Schemas, users, analytics ─────────────────────────────────────────

    @_surface_errors
    def add_data(
        self,
        schema_name: str,
        columns: Sequence[str],
        category: Category | int,
        data: list[list[int]],
    ) -> str:
        column_bytes = encode_strings(columns)
        category = Category(category)
        account = self._prepare()
        return self.contract.add_on_chain_data(schema_name, column_bytes, category, data, account)

    @_surface_errors
    def add_schema(
        self,
        schema_name: str,
        columns: Sequence[str],
        category: Category | int,
    ) -> str:
        column_bytes = encode_strings(columns)
        category = Category(category)
        account = self._prepare()
        return self.contract.add_schema(schema_name, column_bytes, category, account)

    @_surface_errors
    def add_user(self, user_name: str) -> str:
        name = to_bytes32(user_name)
        account = self._prepare()
        return self.contract.add_user(name, account)

    @_surface_errors
    def add_analytics(self, schema_name: str, values: Sequence[object]) -> str:
        encoded = encode_strings(values)
        account = self._prepare()
        return self.contract.add_analytics(schema_name, encoded, account)

    @_surface_errors
    def update_analytics(self, schema_name: str, row_index: int, values: Sequence[object]) -> str:
        encoded = encode_strings(values)
        account = self._prepare()
        return self.contract.update_analytics(schema_name, row_index, encoded, account)

    @_surface_errors
    def get_all_schemas(self) -> list[str]:
        return self.contract.get_all_schemas() or []

    @_surface_errors
    def get_analytics_data_by_schema_name(self, schema_name: str) -> list[list[str]]:
        rows = self.contract.get_analytics_data_by_schema_name(schema_name) or []
        return [[from_bytes32(cell) for cell in row] for row in rows]

    @_surface_errors
    def address_to_id(self, address: str) -> int:
        return self.contract.address_to_id(address)

    @_surface_errors
    def id_to_address(self, user_id: int) -> str:
        return self.contract.id_to_address(user_id)

    @_surface_errors
    def consumer_credits(self, address: Optional[str] = None) -> int:
        """Credits of ``address``, or of the client's own account."""
        if address is None:
            address = resolve_account(self._signer, self.wallet).address
        return self.contract.consumer_credits(address)

    # ── Models ────────────────────────────────────────────────────────────

    @_surface_errors
    def train_model_off_chain(
        self,
        family: ModelFamily,
        data: list[list[int]],
        labels: list[int],
        model_name: str,
    ) -> str:
        account = self._prepare()
        return self.contract.train_off_chain_data(family, data, labels, model_name, account)

    @_surface_errors
    def train_model_from_cid(
        self,
        family: ModelFamily,
        cid: str,
        train_indices: Sequence[int],
        label_index: int,
        model_name: str,
    ) -> str:
        account = self._prepare()
        return self.contract.train_cid_data(
            family, cid, list(train_indices), label_index, model_name, account
        )

    @_surface_errors
    def predict_on_chain_model(
        self,
        family: ModelFamily,
        model_name: str,
        data: list[list[int]],
    ) -> list[int]:
        self._prepare()
        return self.contract.predict_onchain_model(family, model_name, data)

    @_surface_errors
    def extract_cid_data(
        self,
        cid: str,
        train_indices: Sequence[int],
        label_index: int,
    ) -> Any:
        return self.contract.extract_cid_data(cid_to_hex(cid), list(train_indices), label_index)

    # Linear models

    def train_linear_regression_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a linear regression model on scaled data passed in the call."""
        return self.train_model_off_chain(ModelFamily.LINEAR_REGRESSION, data, labels, model_name)

    def train_linear_regression_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a linear regression model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.LINEAR_REGRESSION, cid, train_indices, label_index, model_name
        )

    def predict_linear_regression_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled linear regression predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.LINEAR_REGRESSION, model_name, data)

    def train_logistic_regression_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a logistic regression model on scaled data passed in the call."""
        return self.train_model_off_chain(
            ModelFamily.LOGISTIC_REGRESSION, data, labels, model_name
        )

    def train_logistic_regression_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a logistic regression model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.LOGISTIC_REGRESSION, cid, train_indices, label_index, model_name
        )

    def predict_logistic_regression_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled logistic regression predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.LOGISTIC_REGRESSION, model_name, data)

    # KNN

    def train_knn_regression_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a KNN regression model on scaled data passed in the call."""
        return self.train_model_off_chain(ModelFamily.KNN_REGRESSION, data, labels, model_name)

    def train_knn_regression_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a KNN regression model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.KNN_REGRESSION, cid, train_indices, label_index, model_name
        )

    def predict_knn_regression_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled KNN regression predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.KNN_REGRESSION, model_name, data)

    def train_knn_classification_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a KNN classification model on scaled data passed in the call."""
        return self.train_model_off_chain(ModelFamily.KNN_CLASSIFICATION, data, labels, model_name)

    def train_knn_classification_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a KNN classification model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.KNN_CLASSIFICATION, cid, train_indices, label_index, model_name
        )

    def predict_knn_classification_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled KNN classification predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.KNN_CLASSIFICATION, model_name, data)

    # Decision trees

    def train_decision_tree_regression_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a decision tree regression model on scaled data passed in the call."""
        return self.train_model_off_chain(
            ModelFamily.DECISION_TREE_REGRESSION, data, labels, model_name
        )

    def train_decision_tree_regression_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a decision tree regression model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.DECISION_TREE_REGRESSION, cid, train_indices, label_index, model_name
        )

    def predict_decision_tree_regression_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled decision tree regression predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.DECISION_TREE_REGRESSION, model_name, data)

    def train_decision_tree_classification_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a decision tree classification model on scaled data passed in the call."""
        return self.train_model_off_chain(
            ModelFamily.DECISION_TREE_CLASSIFICATION, data, labels, model_name
        )

    def train_decision_tree_classification_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a decision tree classification model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.DECISION_TREE_CLASSIFICATION, cid, train_indices, label_index, model_name
        )

    def predict_decision_tree_classification_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled decision tree classification predictions for each row of ``data``."""
        return self.predict_on_chain_model(
            ModelFamily.DECISION_TREE_CLASSIFICATION, model_name, data
        )

    # Random forests

    def train_random_forest_regression_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a random forest regression model on scaled data passed in the call."""
        return self.train_model_off_chain(
            ModelFamily.RANDOM_FOREST_REGRESSION, data, labels, model_name
        )

    def train_random_forest_regression_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a random forest regression model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.RANDOM_FOREST_REGRESSION, cid, train_indices, label_index, model_name
        )

    def predict_random_forest_regression_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled random forest regression predictions for each row of ``data``."""
        return self.predict_on_chain_model(ModelFamily.RANDOM_FOREST_REGRESSION, model_name, data)

    def train_random_forest_classification_off_chain_data(
        self, data: list[list[int]], labels: list[int], model_name: str
    ) -> str:
        """Train a random forest classification model on scaled data passed in the call."""
        return self.train_model_off_chain(
            ModelFamily.RANDOM_FOREST_CLASSIFICATION, data, labels, model_name
        )

    def train_random_forest_classification_from_cid(
        self, cid: str, train_indices: Sequence[int], label_index: int, model_name: str
    ) -> str:
        """Train a random forest classification model on a table pinned under ``cid``."""
        return self.train_model_from_cid(
            ModelFamily.RANDOM_FOREST_CLASSIFICATION, cid, train_indices, label_index, model_name
        )

    def predict_random_forest_classification_onchain_model(
        self, model_name: str, data: list[list[int]]
    ) -> list[int]:
        """Scaled random forest classification predictions for each row of ``data``."""
        return self.predict_on_chain_model(
            ModelFamily.RANDOM_FOREST_CLASSIFICATION, model_name, data
        )

    # ── Receipts ──────────────────────────────────────────────────────────

    @_surface_errors
    def wait_for_transaction(self, tx_hash: str, timeout: Optional[float] = None) -> dict:
        """Receipt of ``tx_hash`` once it has 3 confirmations."""
        return self.contract.wait_for_receipt(
            tx_hash, confirmations=DEFAULT_CONFIRMATIONS, timeout=timeout
        )
