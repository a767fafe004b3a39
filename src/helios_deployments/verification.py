"""Verification file generation for helios-deployments library.

Produces the files needed to verify a deployed contract on a block explorer
with the "Standard-JSON-Input" method.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .catalog import find_entry
from .exceptions import BuildInfoNotFoundError, VerificationError
from .types import ContractCatalogEntry, DeploymentRecord

logger = logging.getLogger(__name__)


@dataclass
class VerificationFiles:
    """Paths of generated verification files."""

    standard_input_path: Path
    args_path: Path


def find_build_info(build_info_dir: Path, contract_name: str) -> Tuple[Dict[str, Any], Path]:
    """
    Locate the Hardhat build-info file that compiled a contract.

    Args:
        build_info_dir: Directory of build-info JSON files
        contract_name: Solidity contract name, matched against "<name>.sol" sources

    Returns:
        Tuple of (build_info, build_info_path)

    Raises:
        BuildInfoNotFoundError: If no build-info file covers the contract
        VerificationError: If a build-info file is not valid JSON
    """
    if not build_info_dir.is_dir():
        raise BuildInfoNotFoundError(
            f"Build info directory {build_info_dir} not found. Please recompile your contracts."
        )

    suffix = f"/{contract_name}.sol"
    for build_info_file in sorted(build_info_dir.glob("*.json")):
        try:
            with open(build_info_file, encoding="utf-8") as f:
                build_info = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise VerificationError(f"Build info file {build_info_file} is not valid JSON: {e}") from e

        sources = build_info.get("input", {}).get("sources", {})
        if any(source_path.endswith(suffix) or source_path == suffix[1:] for source_path in sources):
            return build_info, build_info_file

    raise BuildInfoNotFoundError(
        f"Could not find Standard JSON Input for {contract_name}. Please recompile your contracts."
    )


def constructor_arg_types(build_info: Dict[str, Any], contract_name: str) -> List[str]:
    """
    Get the constructor parameter types of a contract from its build-info output.

    Returns:
        Solidity type names in declaration order; empty if there is no constructor
    """
    for contracts in build_info.get("output", {}).get("contracts", {}).values():
        if contract_name in contracts:
            abi = contracts[contract_name].get("abi", [])
            for item in abi:
                if item.get("type") == "constructor":
                    return [param["type"] for param in item.get("inputs", [])]
            return []
    return []


def generate_verification_files(
    record: DeploymentRecord,
    catalog: Iterable[ContractCatalogEntry],
    build_info_dir: Union[Path, str],
    output_dir: Union[Path, str],
    compiler_version: Optional[str] = None,
) -> VerificationFiles:
    """
    Generate the standard JSON input and argument files for a deployment.

    Args:
        record: Deployment record to verify
        catalog: Contract catalog used to resolve the record's logName
        build_info_dir: Hardhat build-info directory (artifacts/build-info)
        output_dir: Directory to write verification files to
        compiler_version: Override for the solc version, e.g. "v0.8.20"

    Returns:
        VerificationFiles with the paths of both files

    Raises:
        VerificationError: If the record has no logName or constructor arguments
        ContractNotFoundError: If the logName has no catalog entry
        BuildInfoNotFoundError: If build metadata for the contract is missing
    """
    if not record.log_name:
        raise VerificationError(
            f"The selected deployment for '{record.key}' does not contain the required metadata."
        )

    entry = find_entry(catalog, record.log_name)

    if record.constructor_args is None:
        raise VerificationError(f"Constructor arguments not found for '{record.key}'.")

    logger.info(
        "Preparing verification for %s (logName: %s)",
        record.key,
        record.log_name,
        extra={"key": record.key, "log_name": record.log_name},
    )

    build_info, build_info_path = find_build_info(Path(build_info_dir), entry.name)
    logger.debug("Using build info %s for %s", build_info_path, entry.name)

    if compiler_version is None:
        solc_version = build_info.get("solcVersion")
        compiler_version = f"v{solc_version}" if solc_version else None

    verification_info = {
        "contractAddress": record.address,
        "compilerVersion": compiler_version,
        "constructorArgTypes": constructor_arg_types(build_info, entry.name),
        "constructorArgs": record.to_dict().get("constructorArgs", []),
    }

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    safe_key = (record.key or record.log_name).replace(" ", "_")
    standard_input_path = output_path / f"{safe_key}_standard_input.json"
    args_path = output_path / f"{safe_key}_args.json"

    with open(standard_input_path, "w") as f:
        json.dump(build_info["input"], f, indent=2)
    with open(args_path, "w") as f:
        json.dump(verification_info, f, indent=2)

    logger.info("Verification files prepared: %s, %s", standard_input_path.name, args_path.name)
    return VerificationFiles(standard_input_path=standard_input_path, args_path=args_path)
