"""Timestamp parsing and block timestamp lookup for helios-deployments library."""

from datetime import datetime, timezone
from typing import Optional

import requests

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as written in deployment logs.

    Args:
        value: Timestamp string, e.g. "2025-07-01T12:00:00.000Z"

    Returns:
        Timezone-aware datetime (naive values are taken as UTC),
        or None if the value is missing or unparseable
    """
    if not isinstance(value, str) or not value:
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime the way the deployer writes timestamps.

    Args:
        moment: Datetime to format (naive values are taken as UTC)

    Returns:
        ISO-8601 string in UTC with millisecond precision and a "Z" suffix
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def fetch_block_timestamp(block_number: int, rpc_url: str, timeout: int = 30) -> datetime:
    """
    Fetch the timestamp of a block via JSON-RPC.

    Args:
        block_number: Block number to look up
        rpc_url: RPC endpoint URL
        timeout: Request timeout in seconds

    Returns:
        Timezone-aware UTC datetime of the block

    Raises:
        KeyError: If RPC response is missing required fields
        ValueError: If RPC returns an error or an unknown block
        RuntimeError: If network error occurs
    """
    try:
        response = requests.post(
            rpc_url,
            json={
                "jsonrpc": "2.0",
                "method": "eth_getBlockByNumber",
                "params": [hex(block_number), False],  # Block number as hex, no full txs
                "id": 1,
            },
            timeout=timeout,
        )

        if response.status_code != 200:
            raise RuntimeError(f"RPC request failed with status {response.status_code}")

        result = response.json()

        if "error" in result:
            raise ValueError(f"RPC error: {result['error']}")
        if result.get("result") is None:
            raise ValueError(f"Block {block_number} not found")

        seconds = int(result["result"]["timestamp"], 16)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    except requests.RequestException as e:
        raise RuntimeError(f"Network error during RPC call: {e}") from e
