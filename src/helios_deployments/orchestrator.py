"""Scheduled deployment run orchestration for helios-deployments library."""

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from .deployer import Deployer
from .exceptions import ContractNotFoundError, DeployerError, PublicationError
from .log_store import DeploymentLogStore
from .scheduling import select_next_contract
from .timestamps import fetch_block_timestamp, format_timestamp, utc_now
from .types import DeployFailure, DeploymentRecord, RunResult, SchedulingConfig

logger = logging.getLogger(__name__)

ReleaseCallable = Callable[[DeploymentRecord], Any]


def ensure_timestamp(
    record: DeploymentRecord, now: datetime, rpc_url: Optional[str] = None
) -> DeploymentRecord:
    """
    Give a record a timestamp if it lacks a parseable one.

    Uses the deploying block's timestamp when an RPC URL is available and the
    block is known, otherwise the record creation time.

    Args:
        record: Record produced by the deployer
        now: Record creation time
        rpc_url: JSON-RPC endpoint for block timestamp lookups

    Returns:
        The record itself if already stamped, otherwise a stamped copy
    """
    if record.deployed_at is not None:
        return record

    moment = now
    if rpc_url and record.block_number is not None:
        try:
            moment = fetch_block_timestamp(record.block_number, rpc_url)
        except (KeyError, ValueError, RuntimeError) as e:
            logger.warning(
                "Could not resolve timestamp of block %s, using current time: %s",
                record.block_number,
                e,
                extra={"key": record.key},
            )

    return dataclasses.replace(record, timestamp=format_timestamp(moment))


class ScheduledDeploymentRunner:
    """Runs one scheduling cycle: prune, decide, deploy, publish, fold."""

    def __init__(
        self,
        store: DeploymentLogStore,
        config: SchedulingConfig,
        deployer: Deployer,
        release_step: Optional[ReleaseCallable] = None,
        rpc_url: Optional[str] = None,
        rng: Optional[Any] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the runner.

        Args:
            store: Durable log and transient buffer storage
            config: Scheduling configuration for this run
            deployer: External deployer
            release_step: Called with the first new record before it is folded
            rpc_url: JSON-RPC endpoint used to stamp records without timestamps
            rng: Random source for the scheduling policy
            clock: Returns the current time
        """
        self.store = store
        self.config = config
        self.deployer = deployer
        self.release_step = release_step
        self.rpc_url = rpc_url
        self.rng = rng
        self.clock = clock

    def decide(self, history: Sequence[DeploymentRecord], now: Optional[datetime] = None) -> str:
        """Ask the scheduling policy for the next logName."""
        if now is None:
            now = self.clock()
        return select_next_contract(history, self.config, now, self.rng)

    def fold(
        self, history: Sequence[DeploymentRecord], records: Sequence[DeploymentRecord]
    ) -> List[DeploymentRecord]:
        """
        Append new records to the durable log and clear the transient buffer.

        Returns:
            The updated durable log
        """
        updated = self.store.append(history, records)
        self.store.clear_transient()
        logger.info(
            "Folded %d record(s) into the durable log (%d total)",
            len(records),
            len(updated),
            extra={"event": "log_folded"},
        )
        return updated

    def run(self) -> RunResult:
        """
        Execute one scheduling cycle.

        Returns:
            RunResult describing the deployment

        Raises:
            ConfigurationError: If no contract can be selected
            DeployerError: If the deployment fails; the log is left as pruned
            LogWriteError: If the log or transient buffer cannot be written
        """
        now = self.clock()

        history, removed = self.store.prune(self.store.load(), self.config.retention_window, now)

        log_name = self.decide(history, now)

        result = self.deployer.deploy(log_name)
        if isinstance(result, DeployFailure):
            raise DeployerError(f"Deployment of {log_name} failed: {result.reason}")

        records = [ensure_timestamp(record, self.clock(), self.rpc_url) for record in result.records]
        if not records:
            logger.warning(
                "Deployer reported success but produced no records",
                extra={"log_name": log_name},
            )

        published = False
        publication_error = None
        try:
            if self.release_step is not None and records:
                try:
                    self.release_step(records[0])
                    published = True
                except (PublicationError, ContractNotFoundError) as e:
                    publication_error = str(e)
                    logger.error(
                        "Release publication failed for %s: %s",
                        records[0].key,
                        e,
                        extra={"key": records[0].key, "event": "release_failed"},
                    )
        finally:
            # A deployment that reached the chain is recorded even if publication raised
            self.fold(history, records)

        logger.info(
            "Successfully completed deployment for %s",
            log_name,
            extra={"log_name": log_name, "event": "run_complete"},
        )
        return RunResult(
            log_name=log_name,
            folded=records,
            pruned=removed,
            published=published,
            publication_error=publication_error,
        )
