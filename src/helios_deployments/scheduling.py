"""Deployment scheduling policy for helios-deployments library.

Decides which contract to deploy next. Contracts in the scheduled class must
be deployed at least once per mandatory interval; when that cadence is met,
any catalog contract is picked uniformly at random. Nothing here performs
I/O, so decisions are reproducible given history, time and a seeded RNG.
"""

import logging
import random
from datetime import datetime
from typing import AbstractSet, Any, Optional, Sequence

from .exceptions import ConfigurationError
from .timestamps import EPOCH
from .types import DeploymentRecord, SchedulingConfig

logger = logging.getLogger(__name__)


def last_scheduled_time(
    history: Sequence[DeploymentRecord], scheduled: AbstractSet[str]
) -> datetime:
    """
    Get the most recent deployment time of any scheduled-class contract.

    Args:
        history: Deployment records (any order)
        scheduled: logNames of the scheduled class

    Returns:
        Latest timestamp among matching records, or the epoch if none exist.
        Records without a parseable timestamp are ignored.
    """
    latest = EPOCH
    for record in history:
        if record.log_name not in scheduled:
            continue
        deployed_at = record.deployed_at
        if deployed_at is not None and deployed_at > latest:
            latest = deployed_at
    return latest


def cadence_due(
    history: Sequence[DeploymentRecord], config: SchedulingConfig, now: datetime
) -> bool:
    """
    Check whether a scheduled-class deployment is mandatory now.

    Always False when the scheduled class is empty.
    """
    if not config.scheduled:
        return False
    return now - last_scheduled_time(history, config.scheduled) >= config.mandatory_interval


def select_next_contract(
    history: Sequence[DeploymentRecord],
    config: SchedulingConfig,
    now: datetime,
    rng: Optional[Any] = None,
) -> str:
    """
    Choose the logName to deploy next.

    Args:
        history: Pruned deployment history
        config: Scheduling configuration
        now: Current time (timezone-aware)
        rng: Object with a ``choice`` method (defaults to the random module)

    Returns:
        logName of the contract to deploy

    Raises:
        ConfigurationError: If the catalog is empty
    """
    if rng is None:
        rng = random

    pool = config.log_names
    if not pool:
        raise ConfigurationError("Contract catalog is empty; nothing can be scheduled")

    if cadence_due(history, config, now):
        # Catalog order keeps seeded choices stable across runs
        scheduled_pool = [name for name in pool if name in config.scheduled]
        if not scheduled_pool:
            raise ConfigurationError(
                f"Scheduled contracts not found in catalog: {', '.join(sorted(config.scheduled))}"
            )
        log_name = rng.choice(scheduled_pool)
        logger.info(
            "Mandatory cadence due, deploying scheduled contract %s",
            log_name,
            extra={"log_name": log_name, "event": "decision_mandatory"},
        )
        return log_name

    log_name = rng.choice(pool)
    logger.info(
        "Cadence satisfied, deploying random contract %s",
        log_name,
        extra={"log_name": log_name, "event": "decision_random"},
    )
    return log_name
