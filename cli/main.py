#!/usr/bin/env python3
"""
NIP13 - Command Line Interface

Compiles NIP13 token commands into aggregate transactions ready for
signing, and derives token accounts from a mnemonic.
"""

import asyncio
import functools
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml
from tabulate import tabulate

from contracts.exceptions import CommandError
from crypto.exceptions import CryptoError
from helpers.accounts import create_public_account
from helpers.derivation import token_path
from ledger.exceptions import LedgerError
from network.rest import RestConfig, RestError, RestLedgerReader
from standards.nip13 import NIP13

from cli import __version__
from cli.config import ConfigurationError, ConfigurationManager


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.output_format: str = "json"
        self.verbose: int = 0
        self.config: Optional[ConfigurationManager] = None
        self.logger: Optional[logging.Logger] = None

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }

        level = log_levels.get(min(self.verbose, 2), logging.DEBUG)

        root = logging.getLogger()
        for existing in [h for h in root.handlers if getattr(h, '_nip13', False)]:
            root.removeHandler(existing)

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handler._nip13 = True
        root.addHandler(handler)
        root.setLevel(level)

        # Suppress verbose third-party logs unless in debug mode
        if self.verbose < 2:
            logging.getLogger('requests').setLevel(logging.WARNING)
            logging.getLogger('urllib3').setLevel(logging.WARNING)

        self.logger = logging.getLogger('nip13-cli')

    def output(self, data: Any):
        """Output data in the selected format."""
        if self.output_format == "yaml":
            click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        elif self.output_format == "table":
            click.echo(self._format_table(data))
        else:
            click.echo(json.dumps(data, indent=2))

    def _format_table(self, data: Any) -> str:
        """Render record lists as a grid and mappings as key/value rows."""
        if isinstance(data, list):
            rows = [{key: _cell(value) for key, value in row.items()} for row in data]
            return tabulate(rows, headers='keys', tablefmt='grid')

        sections = [tabulate(
            [(key, _cell(value)) for key, value in data.items() if not _is_records(value)],
            tablefmt='plain',
        )]
        for key, value in data.items():
            if _is_records(value):
                sections.append(f"{key}:\n{self._format_table(value)}")
        return "\n\n".join(sections)


def _is_records(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(item, dict) for item in value)


def _cell(value: Any) -> Any:
    return json.dumps(value) if isinstance(value, (list, dict)) else value


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Decorator turning domain errors into a clean exit status."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CommandError, ConfigurationError, CryptoError, LedgerError, RestError) as e:
            ctx = click.get_current_context().find_object(CLIContext)
            if ctx and ctx.logger and ctx.verbose >= 2:
                ctx.logger.exception("Command failed")
            raise click.ClickException(str(e))

    return wrapper


def parse_arguments(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated key=value options."""
    arguments = {}
    for value in values:
        key, sep, item = value.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint="--arg")
        arguments[key.strip()] = item
    return arguments


def build_standard(ctx: CLIContext, node: Optional[str] = None) -> NIP13:
    network = ctx.config.network_config()
    node_url = node or network.node_url

    reader = RestLedgerReader(RestConfig(node_url=node_url)) if node_url else None
    return NIP13(
        network,
        reader=reader,
        mnemonic=ctx.config.get('accounts.mnemonic'),
        passphrase=str(ctx.config.get('accounts.passphrase') or ""),
    )


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              help='Path to configuration file')
@click.option('--output-format', '-o',
              type=click.Choice(['json', 'yaml', 'table']),
              default='json',
              help='Output format')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.version_option(__version__, prog_name='nip13')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], output_format: str, verbose: int):
    """
    NIP13 token command compiler

    Examples:
        nip13 derive --name cat.token --source ISIN:US0000000000
        nip13 compile CreateToken --actor <KEY> --name cat.token \\
            --source ISIN:US0000000000 --operator <KEY> --operator <KEY>
    """
    ctx.config_file = config_file
    ctx.output_format = output_format
    ctx.verbose = verbose

    ctx.setup_logging()
    ctx.config = ConfigurationManager(config_file)
    ctx.logger.debug("CLI initialized with context")


@cli.command('commands')
@pass_context
def list_commands(ctx: CLIContext):
    """List the registered NIP13 commands."""
    ctx.output([
        {'name': name, 'arguments': NIP13.COMMANDS[name].ARGUMENTS}
        for name in sorted(NIP13.COMMANDS)
    ])


@cli.command()
@click.option('--name', required=True, help='Dot-separated token name')
@click.option('--source', required=True, help='Token provenance tag')
@pass_context
@handle_cli_error
def derive(ctx: CLIContext, name: str, source: str):
    """Derive the token account for a name and source."""
    standard = build_standard(ctx)
    target = standard.get_target(name, source)

    ctx.output({
        'path': token_path(name, source, standard.network.network_type),
        'public_key': target.public_key.hex,
        'address': target.address.pretty(),
    })


@cli.command('compile')
@click.argument('command')
@click.option('--actor', required=True, help='Public key of the acting account')
@click.option('--target', help='Public key of the token account')
@click.option('--name', help='Token name, used to derive the token account')
@click.option('--source', help='Token provenance tag, used to derive the token account')
@click.option('--identifier', help='Token nonce seed, defaults to source:name')
@click.option('--operator', 'operators', multiple=True, help='Operator public key (repeatable)')
@click.option('--arg', 'args', multiple=True, help='Command argument as key=value (repeatable)')
@click.option('--node', help='REST gateway URL used to synchronize ledger state')
@click.option('--now', type=float, help='Override the current Unix time')
@pass_context
@handle_cli_error
def compile_command(ctx: CLIContext, command: str, actor: str, target: Optional[str],
                    name: Optional[str], source: Optional[str], identifier: Optional[str],
                    operators: Tuple[str, ...], args: Tuple[str, ...],
                    node: Optional[str], now: Optional[float]):
    """Compile COMMAND into an aggregate transaction."""
    standard = build_standard(ctx, node)
    network_type = standard.network.network_type

    argv: Dict[str, Any] = parse_arguments(args)
    if name:
        argv.setdefault('name', name)
    if source:
        argv.setdefault('source', source)
    if operators:
        argv['operators'] = list(operators)
    if identifier or (name and source):
        argv.setdefault('identifier', identifier or f"{source}:{name}")

    if target:
        target_account = create_public_account(target, network_type)
    elif name and source:
        target_account = standard.get_target(name, source)
    else:
        raise click.UsageError("Either --target or both --name and --source are required")

    try:
        aggregate = asyncio.run(standard.execute(
            create_public_account(actor, network_type),
            target_account,
            command,
            argv,
            ctx.config.transaction_parameters(),
            now,
        ))
    finally:
        if standard.reader is not None:
            standard.reader.close()

    ctx.logger.info(f"Compiled {command} into {len(aggregate.inner_transactions)} operations")
    ctx.output(aggregate.to_dict())


def main(argv: Optional[List[str]] = None):
    cli.main(args=argv, prog_name='nip13')


if __name__ == '__main__':
    main()
