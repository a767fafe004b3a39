"""Data types and dataclasses for helios-deployments library."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from .timestamps import parse_timestamp

# Written in place of a block number when the deploying transaction was never confirmed
UNCONFIRMED_BLOCK = "N/A (pending or failed)"

# Persisted key -> attribute name
_FIELD_KEYS = {
    "key": "key",
    "logName": "log_name",
    "address": "address",
    "transactionHash": "transaction_hash",
    "timestamp": "timestamp",
    "explorer": "explorer_url",
}


def _encode_arg(value: Any) -> Any:
    """Encode a constructor argument so large integers survive JSON readers."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_encode_arg(v) for v in value]
    return value


def _decode_block_number(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 10)
        except ValueError:
            return None
    return None


@dataclass
class DeploymentRecord:
    """One entry of the deployment history."""

    key: Optional[str]  # Instance name, e.g. "RandomToken #3"
    log_name: Optional[str]  # Catalog identifier, e.g. "RandomToken"
    address: Optional[str] = None
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None  # None when the transaction is unconfirmed
    timestamp: Optional[str] = None  # ISO-8601 instant
    constructor_args: Optional[List[Any]] = None
    explorer_url: Optional[str] = None

    # Keys written by the deployer that this library does not interpret
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def deployed_at(self) -> Optional[datetime]:
        """Timezone-aware deployment instant, or None if missing or unparseable."""
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the persisted JSON shape.

        Block numbers and integer constructor arguments are written as decimal
        text to avoid precision loss in readers limited to 53-bit integers.

        Returns:
            Dictionary with camelCase keys
        """
        data: Dict[str, Any] = {}
        if self.key is not None:
            data["key"] = self.key
        if self.log_name is not None:
            data["logName"] = self.log_name
        if self.address is not None:
            data["address"] = self.address
        if self.transaction_hash is not None:
            data["transactionHash"] = self.transaction_hash
        data["blockNumber"] = (
            UNCONFIRMED_BLOCK if self.block_number is None else str(self.block_number)
        )
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.constructor_args is not None:
            data["constructorArgs"] = _encode_arg(self.constructor_args)
        if self.explorer_url is not None:
            data["explorer"] = self.explorer_url

        for extra_key, value in self.extra.items():
            data.setdefault(extra_key, value)

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        """
        Build a record from its persisted JSON shape.

        Accepts the legacy ``tx`` key as an alias of ``transactionHash``.

        Args:
            data: Decoded JSON object

        Returns:
            DeploymentRecord; unknown keys are kept in ``extra``
        """
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        for json_key, value in data.items():
            if json_key in _FIELD_KEYS:
                values[_FIELD_KEYS[json_key]] = value
            elif json_key not in ("blockNumber", "constructorArgs", "tx"):
                extra[json_key] = value

        if "transaction_hash" not in values and "tx" in data:
            values["transaction_hash"] = data["tx"]

        constructor_args = data.get("constructorArgs")
        if constructor_args is not None and not isinstance(constructor_args, list):
            constructor_args = [constructor_args]

        return cls(
            key=values.get("key"),
            log_name=values.get("log_name"),
            address=values.get("address"),
            transaction_hash=values.get("transaction_hash"),
            block_number=_decode_block_number(data.get("blockNumber")),
            timestamp=values.get("timestamp"),
            constructor_args=constructor_args,
            explorer_url=values.get("explorer_url"),
            extra=extra,
        )


@dataclass(frozen=True)
class ContractCatalogEntry:
    """Static configuration for one deployable contract."""

    log_name: str  # Unique catalog key
    name: str  # Solidity artifact name
    interactions: FrozenSet[str] = frozenset()  # Behavior tags, e.g. "scheduled"


@dataclass(frozen=True)
class SchedulingConfig:
    """Immutable scheduling inputs, constructed once per run."""

    catalog: Tuple[ContractCatalogEntry, ...]
    scheduled: FrozenSet[str]  # logNames in the mandatory-cadence class
    mandatory_interval: timedelta
    retention_window: timedelta

    @property
    def log_names(self) -> List[str]:
        """All catalog logNames in catalog order."""
        return [entry.log_name for entry in self.catalog]


@dataclass
class DeploySuccess:
    """The external deployer finished and produced records."""

    log_name: str
    records: List[DeploymentRecord] = field(default_factory=list)


@dataclass
class DeployFailure:
    """The external deployer could not deploy the contract."""

    log_name: str
    reason: str
    exit_code: Optional[int] = None


DeployResult = Union[DeploySuccess, DeployFailure]


@dataclass
class RunResult:
    """Outcome of one completed scheduling cycle."""

    log_name: str
    folded: List[DeploymentRecord]
    pruned: int
    published: bool = False
    publication_error: Optional[str] = None
