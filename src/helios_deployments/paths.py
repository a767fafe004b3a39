"""Path management utilities for helios-deployments library."""

from pathlib import Path
from typing import Optional, Union

from .constants import TRANSIENT_BUFFER_FILE, VERIFICATION_DIR, WORKFLOW_LOG_FILE


def get_default_state_dir() -> Path:
    """
    Get default state directory (current working directory).

    Returns:
        Path to the directory holding workflow.json and deployments.json
    """
    return Path.cwd()


def get_state_paths(state_root: Optional[Union[Path, str]] = None) -> tuple[Path, Path, Path]:
    """
    Get state file paths.

    Args:
        state_root: Custom state directory (defaults to the current directory)

    Returns:
        Tuple of (workflow_log_path, transient_buffer_path, verification_dir)
    """
    if state_root is None:
        state_root = get_default_state_dir()
    else:
        state_root = Path(state_root).absolute()

    workflow_path = state_root / WORKFLOW_LOG_FILE
    transient_path = state_root / TRANSIENT_BUFFER_FILE
    verification_dir = state_root / VERIFICATION_DIR

    return (workflow_path, transient_path, verification_dir)
