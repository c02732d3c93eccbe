"""
Open Data Library contract surface.

One method per remote function. Arguments arrive already encoded
(bytes32 columns, scaled integers); this layer only names the call and
orders its arguments. The client is handed an instance of this class,
so tests can swap in any object with the same methods.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from .chain.tx import ContractGateway, to_checksum_address
from .identity.eth import AccountRef

DEFAULT_CONTRACT_ADDRESS = "0x91f78FBEB6c5C29981aFBAB1B20037213E1Ecbc7"


class Category(enum.IntEnum):
    GAMING = 0
    MARKETPLACE = 1
    DEFI = 2
    DAO = 3
    WEB3_SOCIAL = 4
    IDENTITY = 5
    CERTIFICATES = 6


class ModelFamily(enum.Enum):
    LINEAR_REGRESSION = "LinearRegression"
    LOGISTIC_REGRESSION = "LogisticRegression"
    KNN_REGRESSION = "KNNRegression"
    KNN_CLASSIFICATION = "KNNClassification"
    DECISION_TREE_REGRESSION = "DecisionTreeRegression"
    DECISION_TREE_CLASSIFICATION = "DecisionTreeClassification"
    RANDOM_FOREST_REGRESSION = "RandomForestRegression"
    RANDOM_FOREST_CLASSIFICATION = "RandomForestClassification"

    @property
    def train_off_chain_function(self) -> str:
        return f"train{self.value}OffChainData"

    @property
    def train_cid_function(self) -> str:
        return f"train{self.value}CidData"

    @property
    def predict_function(self) -> str:
        return f"predict{self.value}OnchainModel"


class OpenDataLibraryContract:
    def __init__(self, gateway: ContractGateway) -> None:
        self.gateway = gateway

    @property
    def address(self) -> str:
        return self.gateway.address

    # ── Writes ────────────────────────────────────────────────────────────

    def add_on_chain_data(
        self,
        schema_name: str,
        columns: list[bytes],
        category: int,
        data: list[list[int]],
        account: AccountRef,
    ) -> str:
        return self.gateway.write(
            "addOnChainData", [schema_name, columns, int(category), data], account
        )

    def add_schema(
        self,
        schema_name: str,
        columns: list[bytes],
        category: int,
        account: AccountRef,
    ) -> str:
        return self.gateway.write("addSchema", [schema_name, columns, int(category)], account)

    def add_user(self, user_name: bytes, account: AccountRef) -> str:
        return self.gateway.write("addUser", [user_name], account)

    def add_analytics(self, schema_name: str, values: list[bytes], account: AccountRef) -> str:
        return self.gateway.write("addAnalytics", [schema_name, values], account)

    def update_analytics(
        self,
        schema_name: str,
        row_index: int,
        values: list[bytes],
        account: AccountRef,
    ) -> str:
        return self.gateway.write(
            "updateAnalytics", [schema_name, row_index, values], account
        )

    def train_off_chain_data(
        self,
        family: ModelFamily,
        data: list[list[int]],
        labels: list[int],
        model_name: str,
        account: AccountRef,
    ) -> str:
        return self.gateway.write(
            family.train_off_chain_function, [data, labels, model_name], account
        )

    def train_cid_data(
        self,
        family: ModelFamily,
        cid: str,
        train_indices: list[int],
        label_index: int,
        model_name: str,
        account: AccountRef,
    ) -> str:
        return self.gateway.write(
            family.train_cid_function,
            [cid, train_indices, label_index, model_name],
            account,
        )

    # ── Reads ─────────────────────────────────────────────────────────────

    def predict_onchain_model(
        self,
        family: ModelFamily,
        model_name: str,
        data: list[list[int]],
    ) -> list[int]:
        return self.gateway.read(family.predict_function, [model_name, data])

    def extract_cid_data(
        self,
        cid_hex: str,
        train_indices: list[int],
        label_index: int,
    ) -> Any:
        return self.gateway.read("extractCidData", [cid_hex, train_indices, label_index])

    def get_all_schemas(self) -> list[str]:
        return self.gateway.read("getAllSchemas")

    def get_analytics_data_by_schema_name(self, schema_name: str) -> list[list[bytes]]:
        return self.gateway.read("getAnalyticsDataBySchemaName", [schema_name])

    def address_to_id(self, address: str) -> int:
        return self.gateway.read("addressToId", [to_checksum_address(address)])

    def id_to_address(self, user_id: int) -> str:
        return self.gateway.read("idToAddress", [user_id])

    def consumer_credits(self, address: str) -> int:
        return self.gateway.read("consumerCredits", [to_checksum_address(address)])

    # ── Receipts ──────────────────────────────────────────────────────────

    def wait_for_receipt(
        self,
        tx_hash: str,
        confirmations: int,
        timeout: Optional[float] = None,
    ) -> dict:
        if timeout is None:
            return self.gateway.wait_for_receipt(tx_hash, confirmations=confirmations)
        return self.gateway.wait_for_receipt(
            tx_hash, confirmations=confirmations, timeout=timeout
        )
