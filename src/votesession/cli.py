"""Command line presentation of a voting session."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from votesession.artifacts import Interface, function_entries, is_read_only, load_interface
from votesession.config import Settings, get_settings
from votesession.errors import ConfigurationError, SessionFailure
from votesession.logging_utils import configure_logging
from votesession.provider import release_provider
from votesession.session import SessionResult, establish_session

GENERIC_FAILURE_MESSAGE = "Failed to load web3, accounts, or contract. Check logs for details."
OWNER_ACTIONS = (
    "addVoter",
    "startProposalsRegistering",
    "endProposalsRegistering",
    "startVotingSession",
    "endVotingSession",
    "tallyVotes",
)
VOTER_ACTIONS = ("getVoter", "addProposal", "getOneProposal", "setVote", "winningProposalID")

console = Console()

app = typer.Typer(
    name="votesession",
    help="Bind a wallet to the voting contract and resolve its role.",
    add_completion=False,
)


@app.callback()
def main_callback(log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level override")) -> None:
    settings = get_settings()
    configure_logging(profile=settings.log_profile, level=log_level or settings.log_level)


def available_actions(interface: Interface, names: tuple[str, ...]) -> list[str]:
    declared = {str(entry.get("name")) for entry in function_entries(interface)}
    return [name for name in names if name in declared]


def _fail(failure: SessionFailure) -> None:
    logger.debug("connect.aborted kind={}", failure.kind.value)
    console.print(f"[bold red]{GENERIC_FAILURE_MESSAGE}[/bold red]")
    raise typer.Exit(1)


def _render_session(result: SessionResult, settings: Settings) -> None:
    interface = load_interface(settings.artifact_path)
    table = Table(title="Vote DApp", show_header=False)
    table.add_row("Account", result.display_address)
    table.add_row("Role", result.role.value)
    table.add_row("Contract", str(getattr(result.contract, "address", "")))
    console.print(table)

    actions = OWNER_ACTIONS if result.is_owner else VOTER_ACTIONS
    heading = "Administration" if result.is_owner else "Voting"
    listed = available_actions(interface, actions)
    if listed:
        console.print(f"[bold]{heading}:[/bold] " + ", ".join(listed))


@app.command()
def connect(
    rpc_url: Optional[str] = typer.Option(None, "--rpc-url", help="Fallback JSON-RPC endpoint"),
    contract_address: Optional[str] = typer.Option(None, "--contract-address", help="Voting contract address"),
    artifact: Optional[Path] = typer.Option(None, "--artifact", help="Contract build artifact (ABI)"),
) -> None:
    """Establish a session and show the owner or voter view."""

    settings = get_settings(rpc_url=rpc_url, contract_address=contract_address, artifact_path=artifact)
    asyncio.run(_connect(settings))


async def _connect(settings: Settings) -> None:
    outcome = await establish_session(settings)
    if isinstance(outcome, SessionFailure):
        _fail(outcome)
    try:
        _render_session(outcome, settings)
    finally:
        await release_provider(outcome.provider)


@app.command()
def abi(artifact: Optional[Path] = typer.Option(None, "--artifact", help="Contract build artifact (ABI)")) -> None:
    """List contract methods grouped by mutability."""

    settings = get_settings(artifact_path=artifact)
    try:
        interface = load_interface(settings.artifact_path)
    except ConfigurationError as exc:
        logger.opt(exception=exc).error("abi.unreadable")
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(1) from exc

    table = Table(title="Contract interface")
    table.add_column("Method")
    table.add_column("Kind")
    for entry in function_entries(interface):
        kind = "read-only" if is_read_only(entry) else "state-changing"
        table.add_row(str(entry.get("name")), kind)
    console.print(table)
