"""Contract catalog loading and validation for helios-deployments library."""

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

from .constants import DEFAULT_MANDATORY_INTERVAL, DEFAULT_RETENTION_WINDOW, SCHEDULED_TAG
from .exceptions import CatalogNotFoundError, ConfigurationError, ContractNotFoundError
from .types import ContractCatalogEntry, SchedulingConfig

logger = logging.getLogger(__name__)


def _parse_interactions(raw: Any, log_name: str) -> FrozenSet[str]:
    """
    Normalize the interactions of a catalog entry to a set of tags.

    Interactions are either plain strings or objects with a "type" field.
    """
    if raw is None:
        return frozenset()
    if not isinstance(raw, list):
        raise ConfigurationError(f"Interactions of '{log_name}' must be a list")

    tags = set()
    for interaction in raw:
        if isinstance(interaction, str):
            tags.add(interaction)
        elif isinstance(interaction, dict) and isinstance(interaction.get("type"), str):
            tags.add(interaction["type"])
        else:
            raise ConfigurationError(
                f"Invalid interaction {interaction!r} for contract '{log_name}'"
            )
    return frozenset(tags)


def parse_catalog(data: Dict[str, Any]) -> List[ContractCatalogEntry]:
    """
    Parse the decoded catalog document into entries.

    Args:
        data: Decoded catalog JSON with a "contracts" list

    Returns:
        Catalog entries in document order

    Raises:
        ConfigurationError: If the document shape is invalid or logNames repeat
    """
    if not isinstance(data, dict) or not isinstance(data.get("contracts"), list):
        raise ConfigurationError("Catalog must be an object with a 'contracts' list")

    entries: List[ContractCatalogEntry] = []
    seen = set()

    for raw in data["contracts"]:
        if not isinstance(raw, dict) or not isinstance(raw.get("logName"), str):
            raise ConfigurationError(f"Catalog entry without a logName: {raw!r}")

        log_name = raw["logName"]
        if log_name in seen:
            raise ConfigurationError(f"Duplicate logName '{log_name}' in catalog")
        seen.add(log_name)

        entries.append(
            ContractCatalogEntry(
                log_name=log_name,
                # Artifact name defaults to the logName
                name=str(raw.get("name", log_name)),
                interactions=_parse_interactions(raw.get("interactions"), log_name),
            )
        )

    return entries


def load_catalog_document(catalog_path: Union[Path, str]) -> Dict[str, Any]:
    """
    Read the raw catalog document.

    Raises:
        CatalogNotFoundError: If the catalog file does not exist
        ConfigurationError: If the file is not valid JSON
    """
    path = Path(catalog_path)
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogNotFoundError(f"Contract catalog not found at {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Contract catalog at {path} is not valid JSON: {e}") from e


def load_catalog(catalog_path: Union[Path, str]) -> List[ContractCatalogEntry]:
    """
    Load contract catalog entries from a JSON file.

    Args:
        catalog_path: Path to the catalog (deployment-config-template.json)

    Returns:
        Catalog entries in file order

    Raises:
        CatalogNotFoundError: If the catalog file does not exist
        ConfigurationError: If the catalog is malformed
    """
    return parse_catalog(load_catalog_document(catalog_path))


def _hours(value: Any, setting: str) -> timedelta:
    try:
        hours = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{setting} must be a number of hours, got {value!r}") from e
    return timedelta(hours=hours)


def build_scheduling_config(
    catalog: Sequence[ContractCatalogEntry],
    mandatory_interval: Optional[timedelta] = None,
    retention_window: Optional[timedelta] = None,
    scheduled_log_names: Iterable[str] = (),
    schedule: Optional[Dict[str, Any]] = None,
    scheduled_tag: str = SCHEDULED_TAG,
) -> SchedulingConfig:
    """
    Construct the immutable scheduling configuration for one run.

    Explicit arguments take precedence over the catalog "schedule" block,
    which takes precedence over library defaults.

    Args:
        catalog: Contract catalog entries
        mandatory_interval: Maximum gap between scheduled-class deployments
        retention_window: Age beyond which history records are pruned
        scheduled_log_names: Extra logNames forced into the scheduled class
        schedule: "schedule" block of the catalog document, if any
        scheduled_tag: Interaction tag marking scheduled-class contracts

    Returns:
        SchedulingConfig

    Raises:
        ConfigurationError: If the catalog is empty, a scheduled logName is not
            in the catalog, or an interval is not positive
    """
    schedule = schedule or {}

    if not catalog:
        raise ConfigurationError("Contract catalog is empty; nothing can be scheduled")

    if mandatory_interval is None:
        if "mandatoryIntervalHours" in schedule:
            mandatory_interval = _hours(schedule["mandatoryIntervalHours"], "mandatoryIntervalHours")
        else:
            mandatory_interval = DEFAULT_MANDATORY_INTERVAL
    if retention_window is None:
        if "retentionHours" in schedule:
            retention_window = _hours(schedule["retentionHours"], "retentionHours")
        else:
            retention_window = DEFAULT_RETENTION_WINDOW

    if mandatory_interval <= timedelta(0):
        raise ConfigurationError("Mandatory interval must be positive")
    if retention_window <= timedelta(0):
        raise ConfigurationError("Retention window must be positive")

    known = {entry.log_name for entry in catalog}
    listed = schedule.get("scheduledLogNames", [])
    if not isinstance(listed, list):
        raise ConfigurationError("scheduledLogNames must be a list of logNames")
    explicit = set(scheduled_log_names) | set(listed)

    missing = sorted(explicit - known)
    if missing:
        raise ConfigurationError(
            f"Scheduled contracts not found in catalog: {', '.join(missing)}"
        )

    scheduled = frozenset(
        {entry.log_name for entry in catalog if scheduled_tag in entry.interactions} | explicit
    )

    if not scheduled:
        logger.warning("No scheduled-class contracts configured; mandatory cadence is disabled")

    return SchedulingConfig(
        catalog=tuple(catalog),
        scheduled=scheduled,
        mandatory_interval=mandatory_interval,
        retention_window=retention_window,
    )


def find_entry(catalog: Iterable[ContractCatalogEntry], log_name: Optional[str]) -> ContractCatalogEntry:
    """
    Resolve a catalog entry by logName.

    Raises:
        ContractNotFoundError: If no entry matches
    """
    for entry in catalog:
        if entry.log_name == log_name:
            return entry
    raise ContractNotFoundError(f"Contract config for logName '{log_name}' not found in catalog")
