"""CLI command for auditing a chunk store."""
import logging
import sys
from typing import Optional

import click

from audit.config import (
    AuditConfig,
    CURRENT_SCHEMA_NAME,
    DEFAULT_CHECKS,
    DEFAULT_STORE_PATH,
)
from audit.engine import AuditEngine
from audit.exceptions import StoreSetupError
from audit.localstore import LocalStore
from audit.registry import create_checker, list_checkers
from blob_store.store import DEFAULT_SHARD_COUNT
from index_store.engine import LevelDBEngine
from models.swarm import HASH_SIZE, SOC_MAX_CHUNK_SIZE


def _parse_checks(value: str):
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_address(value: Optional[str]) -> Optional[bytes]:
    if not value:
        return None
    try:
        address = bytes.fromhex(value[2:] if value.startswith("0x") else value)
    except ValueError:
        raise click.BadParameter("must be hex encoded", param_hint="--base-address")
    if len(address) != HASH_SIZE:
        raise click.BadParameter(f"must be {HASH_SIZE} bytes", param_hint="--base-address")
    return address


@click.command()
@click.option("--path", "path", default=DEFAULT_STORE_PATH, show_default=True,
              help="Path to localstore directory")
@click.option("--schema", "schema_name", default=CURRENT_SCHEMA_NAME, show_default=True,
              help="Expected store schema name")
@click.option("--shards", "shard_count", type=click.IntRange(1, 256),
              default=DEFAULT_SHARD_COUNT, show_default=True,
              help="Number of sharky shard files")
@click.option("--max-record-size", "max_record_size", type=click.IntRange(1),
              default=SOC_MAX_CHUNK_SIZE, show_default=True,
              help="Sharky slot size in bytes")
@click.option("--base-address", "base_address",
              help="Hex overlay address, used to compute proximity order bytes")
@click.option("--checks", "checks", default=",".join(DEFAULT_CHECKS), show_default=True,
              help="Comma-separated check list")
@click.option("--strict", "strict", is_flag=True, default=False,
              help="Exit with status 1 when inconsistencies or corruptions are found")
@click.option("-v", "--verbose", "verbose", is_flag=True, default=False,
              help="Debug logging to stderr")
def check(path: str,
          schema_name: str,
          shard_count: int,
          max_record_size: int,
          base_address: Optional[str],
          checks: str,
          strict: bool,
          verbose: bool):
    """
    Check a localstore for index inconsistencies and data corruption.

    Example:
      chunkaudit check --path /var/lib/node/localstore
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    check_names = _parse_checks(checks)
    if not check_names:
        raise click.ClickException("No checks specified")

    available = set(list_checkers())
    for name in check_names:
        if name not in available:
            options = ", ".join(sorted(available))
            raise click.ClickException(f"Unknown check '{name}'. Available: {options}")

    config = AuditConfig(
        path=path,
        schema_name=schema_name,
        shard_count=shard_count,
        max_record_size=max_record_size,
        base_address=_parse_address(base_address),
        checks=check_names,
        strict=strict,
    )
    report = run_check(config)
    if report is not None and config.strict and report.has_findings:
        sys.exit(1)


def run_check(config: AuditConfig, engine_factory=None):
    """Open the store, run the configured checks and print the report."""
    checkers = [create_checker(name) for name in config.checks]
    store = LocalStore(config, engine_factory or LevelDBEngine)
    try:
        store.open()
    except StoreSetupError as e:
        # startup diagnostics are printed, not raised; nothing is audited
        click.echo(str(e))
        return None
    except RuntimeError as e:
        raise click.ClickException(str(e))

    try:
        click.echo(f"Starting check for localstore at {config.path}...")
        engine = AuditEngine(checkers, store.registry, store.blob_store)
        report = engine.run()
    finally:
        store.close()

    click.echo(report.to_text())
    return report
