"""Command line interface: ``helios-deployments``.

Entry point configured via pyproject.toml console_scripts. Intended to be
invoked by a recurring external trigger (cron, CI schedule), one run at a time.
"""

from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from .catalog import build_scheduling_config, load_catalog_document, parse_catalog
from .deployer import HardhatDeployer
from .exceptions import DeploymentError
from .log_store import DeploymentLogStore
from .logs import configure_logging
from .orchestrator import ScheduledDeploymentRunner
from .releases import GitHubReleasePublisher, ReleaseStep
from .scheduling import select_next_contract
from .settings import Settings, load_settings
from .timestamps import utc_now
from .types import ContractCatalogEntry, DeploymentRecord, SchedulingConfig
from .verification import generate_verification_files

# Exit code of a run whose deployment was recorded but whose release failed
EXIT_PUBLICATION_FAILED = 2

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="helios-deployments",
    help="Scheduled smart contract deployments with history-based cadence.",
    no_args_is_help=True,
    add_completion=False,
)


def _fail(error: Exception, code: int = 1) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(code=code)


def _load_config(settings: Settings) -> Tuple[List[ContractCatalogEntry], SchedulingConfig]:
    document = load_catalog_document(settings.catalog_path)
    catalog = parse_catalog(document)
    config = build_scheduling_config(
        catalog,
        mandatory_interval=settings.mandatory_interval,
        retention_window=settings.retention_window,
        schedule=document.get("schedule"),
    )
    return catalog, config


def _store(settings: Settings) -> DeploymentLogStore:
    return DeploymentLogStore(settings.workflow_log_path, settings.transient_path)


def _release_step(settings: Settings, catalog: List[ContractCatalogEntry]) -> ReleaseStep:
    publisher = GitHubReleasePublisher(settings.github_token or "", settings.github_repository or "")
    return ReleaseStep(
        publisher,
        catalog,
        build_info_dir=settings.build_info_dir,
        output_dir=settings.verification_dir,
        network=settings.network,
    )


def _find_record(records: List[DeploymentRecord], key: Optional[str]) -> DeploymentRecord:
    """Most recent record with the given key, or the most recent record overall."""
    for record in reversed(records):
        if key is None or record.key == key:
            return record
    if key is None:
        raise DeploymentError("No deployments found in the durable log")
    raise DeploymentError(f"No deployment with key '{key}' found in the durable log")


@app.callback()
def main(
    ctx: typer.Context,
    state_dir: Optional[Path] = typer.Option(
        None, "--state-dir", help="Directory holding workflow.json and deployments.json."
    ),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", help="Contract catalog (deployment-config-template.json)."
    ),
    project_dir: Optional[Path] = typer.Option(
        None, "--project-dir", help="Hardhat project directory."
    ),
    network: Optional[str] = typer.Option(None, "--network", help="Hardhat network name."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines."),
) -> None:
    """Scheduled smart contract deployments."""
    configure_logging(log_level, json_logs)
    try:
        ctx.obj = load_settings(
            state_dir=state_dir,
            catalog_path=catalog,
            project_dir=project_dir,
            network=network,
        )
    except DeploymentError as e:
        _fail(e)


@app.command(name="run", help="Run one scheduling cycle: prune, decide, deploy, record.")
def run_cmd(
    ctx: typer.Context,
    release: Optional[bool] = typer.Option(
        None,
        "--release/--no-release",
        help="Publish a GitHub release for the new deployment. "
        "Defaults to releasing only when GITHUB_TOKEN and GITHUB_REPOSITORY are set.",
    ),
) -> None:
    settings: Settings = ctx.obj
    if release is None:
        release = bool(settings.github_token and settings.github_repository)
        if not release:
            err_console.print("[yellow]GitHub credentials not configured, skipping release[/yellow]")
    try:
        catalog, config = _load_config(settings)
        store = _store(settings)
        release_step = _release_step(settings, catalog) if release else None
        deployer = HardhatDeployer(store, project_dir=settings.project_dir, network=settings.network)

        runner = ScheduledDeploymentRunner(
            store,
            config,
            deployer,
            release_step=release_step,
            rpc_url=settings.rpc_url,
        )
        result = runner.run()
    except DeploymentError as e:
        _fail(e)

    console.print(f"[bold green]Deployed[/bold green] {result.log_name}")
    if result.publication_error is not None:
        err_console.print(
            f"[bold yellow]Deployment recorded, release failed:[/bold yellow] {escape(result.publication_error)}"
        )
        raise typer.Exit(code=EXIT_PUBLICATION_FAILED)


@app.command(name="next", help="Print the contract the next run would deploy.")
def next_cmd(ctx: typer.Context) -> None:
    settings: Settings = ctx.obj
    try:
        _, config = _load_config(settings)
        history = _store(settings).load()
        log_name = select_next_contract(history, config, utc_now())
    except DeploymentError as e:
        _fail(e)

    typer.echo(log_name)


@app.command(name="prune", help="Drop durable log records older than the retention window.")
def prune_cmd(ctx: typer.Context) -> None:
    settings: Settings = ctx.obj
    try:
        _, config = _load_config(settings)
        store = _store(settings)
        kept, removed = store.prune(store.load(), config.retention_window)
    except DeploymentError as e:
        _fail(e)

    typer.echo(f"Removed {removed} record(s); {len(kept)} remain.")


@app.command(name="verify", help="Generate verification files for a recorded deployment.")
def verify_cmd(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Deployment key, e.g. 'RandomToken #3'."),
) -> None:
    settings: Settings = ctx.obj
    try:
        catalog, _ = _load_config(settings)
        record = _find_record(_store(settings).load(), key)
        files = generate_verification_files(
            record, catalog, settings.build_info_dir, settings.verification_dir
        )
    except DeploymentError as e:
        _fail(e)

    typer.echo(f"Standard JSON Input: {files.standard_input_path}")
    typer.echo(f"Arguments Info:      {files.args_path}")


@app.command(name="release", help="Publish a GitHub release for a recorded deployment.")
def release_cmd(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(None, "--key", help="Deployment key (defaults to the latest)."),
) -> None:
    settings: Settings = ctx.obj
    try:
        catalog, _ = _load_config(settings)
        record = _find_record(_store(settings).load(), key)
        release = _release_step(settings, catalog)(record)
    except DeploymentError as e:
        _fail(e)

    console.print(f"[bold green]Release created:[/bold green] {release.get('html_url', release.get('name'))}")


if __name__ == "__main__":
    app()
