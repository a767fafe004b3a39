"""Durable deployment log and transient buffer storage for helios-deployments library."""

import json
import logging
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .exceptions import LogWriteError
from .timestamps import utc_now
from .types import DeploymentRecord

logger = logging.getLogger(__name__)


def read_records(path: Path) -> List[DeploymentRecord]:
    """
    Read an ordered sequence of deployment records from a JSON file.

    Args:
        path: Path to a JSON array of records

    Returns:
        Records in file order. Empty list if the file doesn't exist or its
        content is not a JSON array of objects (logged as a structural error)
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        return []
    except UnicodeDecodeError as e:
        logger.error("Deployment log %s is not valid UTF-8, treating it as empty: %s", path, e)
        return []
    except OSError as e:
        logger.error("Cannot read deployment log %s, treating it as empty: %s", path, e)
        return []

    if not content.strip():
        return []

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Deployment log %s is not valid JSON, treating it as empty: %s", path, e)
        return []

    # Older logs were keyed mappings; those are not merged back in
    if not isinstance(data, list):
        logger.error(
            "Deployment log %s is a %s, expected an array of records; treating it as empty",
            path,
            type(data).__name__,
        )
        return []

    if not all(isinstance(item, dict) for item in data):
        logger.error("Deployment log %s contains non-object entries; treating it as empty", path)
        return []

    return [DeploymentRecord.from_dict(item) for item in data]


def write_records(path: Path, records: Sequence[DeploymentRecord]) -> None:
    """
    Atomically replace a JSON file with the given records.

    Creates parent directories if they don't exist.

    Raises:
        LogWriteError: If the file cannot be written
    """
    payload = json.dumps([record.to_dict() for record in records], indent=2)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            # mkstemp creates owner-only files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise LogWriteError(f"Failed to write deployment log {path}: {e}") from e


class DeploymentLogStore:
    """Owns the durable deployment log and the transient buffer files."""

    def __init__(self, log_path: Union[Path, str], transient_path: Union[Path, str]):
        """
        Initialize the store.

        Args:
            log_path: Path to the durable log (workflow.json)
            transient_path: Path to the buffer written by the deployer (deployments.json)
        """
        self.log_path = Path(log_path)
        self.transient_path = Path(transient_path)

    def load(self) -> List[DeploymentRecord]:
        """
        Load the durable log.

        Returns:
            Records oldest first; empty on first run or when the file is malformed
        """
        records = read_records(self.log_path)
        logger.debug("Loaded %d records from %s", len(records), self.log_path)
        return records

    def save(self, log: Sequence[DeploymentRecord]) -> None:
        """Replace the durable log."""
        write_records(self.log_path, log)

    def prune(
        self,
        log: Sequence[DeploymentRecord],
        retention_window: timedelta,
        now: Optional[datetime] = None,
    ) -> Tuple[List[DeploymentRecord], int]:
        """
        Drop records older than the retention window and persist the result.

        Records without a parseable timestamp are always dropped.

        Args:
            log: Current durable log
            retention_window: Maximum record age to keep
            now: Reference time (defaults to current UTC time)

        Returns:
            Tuple of (kept_records, removed_count)

        Raises:
            LogWriteError: If the pruned log cannot be persisted
        """
        if now is None:
            now = utc_now()
        cutoff = now - retention_window

        kept = []
        for record in log:
            deployed_at = record.deployed_at
            if deployed_at is not None and deployed_at >= cutoff:
                kept.append(record)

        removed = len(log) - len(kept)
        self.save(kept)

        logger.info(
            "Pruned %d of %d records older than %s",
            removed,
            len(log),
            retention_window,
            extra={"event": "log_pruned"},
        )
        return kept, removed

    def append(
        self, log: Sequence[DeploymentRecord], new_records: Sequence[DeploymentRecord]
    ) -> List[DeploymentRecord]:
        """
        Append records to the durable log and persist the result.

        Args:
            log: Current durable log
            new_records: Records to add, oldest first

        Returns:
            The combined log

        Raises:
            LogWriteError: If the log cannot be persisted
        """
        combined = list(log) + list(new_records)
        self.save(combined)
        return combined

    def load_transient(self) -> List[DeploymentRecord]:
        """Read the records produced by the current run's deployment step."""
        return read_records(self.transient_path)

    def clear_transient(self) -> None:
        """
        Reset the transient buffer to an empty sequence.

        Raises:
            LogWriteError: If the buffer cannot be written
        """
        write_records(self.transient_path, [])
