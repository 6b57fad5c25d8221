"""
JaguarPlace CLI

Commands:
  operations  - List the contract operations in the ABI
  call        - Execute one contract operation and wait for it
  run         - Execute a plan of operations in order

The signing key is read from JAGUARPLACE_PRIVATE_KEY only; it is never
accepted as a command-line option.
"""
import json
import logging
import sys
from typing import Any, List, Optional, Sequence

import click

from jaguarplace_sdk import __version__
from jaguarplace_sdk.client import CallDriver
from jaguarplace_sdk.config import DriverConfig, load_abi, load_bundled_abi
from jaguarplace_sdk.exceptions import ExecutionReverted, JaguarPlaceError
from jaguarplace_sdk.schema import InterfaceSchema
from jaguarplace_sdk.sequence import example_sequence, load_steps, run_sequence


def parse_arg(raw: str) -> Any:
    """Parse a command-line argument as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _make_driver(
    rpc_url: Optional[str],
    contract: Optional[str],
    abi_path: Optional[str],
    confirmations: int,
    timeout: float
) -> CallDriver:
    overrides: dict = {"confirmations": confirmations, "receipt_timeout": timeout}
    if rpc_url:
        overrides["rpc_url"] = rpc_url
    if contract:
        overrides["contract_address"] = contract
    if abi_path:
        overrides["abi"] = load_abi(abi_path)
    return CallDriver(DriverConfig.from_env(**overrides))


def _fail(message: str) -> None:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def connection_options(fn):
    """Options shared by every command that talks to the chain."""
    fn = click.option("--timeout", default=120.0, type=float, show_default=True,
                      help="Seconds to wait for each receipt")(fn)
    fn = click.option("--confirmations", default=1, type=int, show_default=True,
                      help="Blocks to wait for after inclusion")(fn)
    fn = click.option("--abi-path", envvar="JAGUARPLACE_ABI_PATH", default=None,
                      help="ABI JSON file (defaults to the bundled JaguarPlace ABI)")(fn)
    fn = click.option("--contract", envvar="JAGUARPLACE_CONTRACT_ADDRESS", default=None,
                      help="Contract address")(fn)
    fn = click.option("--rpc-url", envvar="JAGUARPLACE_RPC_URL", default=None,
                      help="JSON-RPC endpoint URL")(fn)
    return fn


@click.group()
@click.version_option(version=__version__, prog_name="jaguarplace")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Drive the JaguarPlace marketplace contract."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--abi-path", envvar="JAGUARPLACE_ABI_PATH", default=None,
              help="ABI JSON file (defaults to the bundled JaguarPlace ABI)")
def operations(abi_path: Optional[str]) -> None:
    """List the state-changing operations in the ABI."""
    try:
        abi = load_abi(abi_path) if abi_path else load_bundled_abi()
        schema = InterfaceSchema.from_abi(abi)
    except JaguarPlaceError as exc:
        _fail(str(exc))

    for op in schema:
        suffix = click.style("  payable", fg="yellow") if op.payable else ""
        click.echo(f"{op.signature}{suffix}")


@cli.command()
@click.argument("operation")
@click.argument("args", nargs=-1)
@click.option("--value", default=None, help="Ether to attach (payable operations only)")
@connection_options
def call(
    operation: str,
    args: Sequence[str],
    value: Optional[str],
    rpc_url: Optional[str],
    contract: Optional[str],
    abi_path: Optional[str],
    confirmations: int,
    timeout: float,
) -> None:
    """
    Execute OPERATION with ARGS and wait for it to be final.

    Arguments are parsed as JSON when possible (numbers, true/false),
    otherwise passed as strings.
    """
    parsed = [parse_arg(a) for a in args]
    try:
        driver = _make_driver(rpc_url, contract, abi_path, confirmations, timeout)
        with driver:
            click.echo(f"  Sender: {driver.address}")
            click.echo(f"  Function: {operation}")
            click.echo(f"  Args: {parsed}")
            if value is not None:
                click.echo(f"  Value: {value} ETH")
            result = driver.execute(operation, parsed, value)
    except ExecutionReverted as exc:
        _fail(f"{operation} reverted: {exc.reason or 'no reason given'}")
    except JaguarPlaceError as exc:
        _fail(f"{operation} failed: {exc}")

    click.secho("SUCCESS: Transaction confirmed!", fg="green")
    click.echo(f"  TX: {result.tx_hash}")
    click.echo(f"  Block: {result.receipt.block_number}")


@cli.command()
@click.argument("plan", required=False, type=click.Path(dir_okay=False))
@click.option("--new-owner", default=None, help="New owner for the example sequence")
@click.option("--user", default=None, help="User to blacklist/whitelist in the example sequence")
@click.option("--stop-on-error/--continue-on-error", default=False,
              help="Stop at the first failing step (default: continue)")
@connection_options
def run(
    plan: Optional[str],
    new_owner: Optional[str],
    user: Optional[str],
    stop_on_error: bool,
    rpc_url: Optional[str],
    contract: Optional[str],
    abi_path: Optional[str],
    confirmations: int,
    timeout: float,
) -> None:
    """
    Run the steps in PLAN (a JSON list of {operation, args, value}) in order.

    Without PLAN, runs the example sequence, which needs --new-owner and --user.
    """
    try:
        if plan:
            steps = load_steps(plan)
        else:
            if not new_owner or not user:
                _fail("--new-owner and --user are required without a plan file")
            steps = example_sequence(new_owner, user)
        driver = _make_driver(rpc_url, contract, abi_path, confirmations, timeout)
    except JaguarPlaceError as exc:
        _fail(str(exc))

    with driver:
        outcomes = run_sequence(driver, steps, stop_on_error=stop_on_error)

    failed = _report(outcomes)
    if failed:
        sys.exit(1)


def _report(outcomes: List) -> int:
    failed = 0
    for outcome in outcomes:
        name = outcome.step.operation
        if outcome.ok:
            click.echo(click.style("  ok    ", fg="green") + f"{name}  {outcome.result.tx_hash}")
        elif outcome.skipped:
            click.echo(click.style("  skip  ", dim=True) + name)
        else:
            failed += 1
            click.echo(click.style("  FAIL  ", fg="red") + f"{name}  {outcome.reason}")
    succeeded = sum(1 for o in outcomes if o.ok)
    skipped = sum(1 for o in outcomes if o.skipped)
    click.echo(f"{succeeded} succeeded, {failed} failed, {skipped} skipped")
    return failed


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
