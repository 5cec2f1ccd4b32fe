"""CLI adapter for ``lib_cmdb`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect what the resolution engine sees without writing Python:
look up a key, dump every pair, print the environment export, or list the
sources in precedence order.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command; global options override environment settings.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_get` – resolves one key and prints it as JSON.
* :func:`cli_pairs` – prints every pair in source order.
* :func:`cli_env` – prints the environment export (shell or JSON).
* :func:`cli_sources` – prints the ordered source list.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer. It builds :class:`lib_cmdb.core.Interface` from
:func:`lib_cmdb.adapters.env.default.load_settings` plus command-line
overrides; ``lib_cli_exit_tools`` turns library exceptions into exit codes.
"""

from __future__ import annotations

import json
import shlex
import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import load_settings
from .core import Interface

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

ENV_FORMAT_CHOICES: Final[tuple[str, ...]] = ("shell", "json")


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_cmdb")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Namespaced configuration lookup across files and Consul",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_cmdb",
    message="lib_cmdb version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option("--root", default=None, help="Subkey every data file is re-rooted under")
@click.option(
    "--dir",
    "directories",
    multiple=True,
    help="Base directory to search for data files (repeatable, keeps order)",
)
@click.option(
    "--development/--production",
    default=None,
    help="Tolerate overlapping namespaces and search ./.cmdb (default from LIB_CMDB_ENV)",
)
@click.option("--consul-url", default=None, help="Consul HTTP endpoint")
@click.option("--prefix", "prefixes", multiple=True, help="Consul key prefix (repeatable, keeps order)")
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    root: Optional[str],
    directories: Sequence[str],
    development: Optional[bool],
    consul_url: Optional[str],
    prefixes: Sequence[str],
) -> None:
    """Root command storing traceback preference and settings overrides.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["overrides"] = {
        "root": root,
        "directories": tuple(directories) or None,
        "development": development,
        "consul_url": consul_url,
        "consul_prefixes": tuple(prefixes) or None,
    }
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


def _interface(ctx: click.Context) -> Interface:
    """Build the engine from environment settings plus CLI overrides."""

    overrides = ctx.obj.get("overrides", {}) if ctx.obj else {}
    return Interface(load_settings().with_overrides(**overrides))


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_cmdb")
    except metadata.PackageNotFoundError:
        click.echo("lib_cmdb (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_cmdb')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.option(
    "--required/--optional",
    default=False,
    help="Fail with MissingKey instead of printing null when no source has KEY",
)
@click.pass_context
def cli_get(ctx: click.Context, key: str, required: bool) -> None:
    """Resolve KEY and print its value as JSON."""

    cmdb = _interface(ctx)
    value = cmdb.require(key) if required else cmdb.get(key)
    click.echo(json.dumps(value))


@cli.command("pairs", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.pass_context
def cli_pairs(ctx: click.Context, indent: Optional[int]) -> None:
    """Print every key/value pair in source order (duplicates included)."""

    pairs = [[key, value] for key, value in _interface(ctx).each_pair()]
    click.echo(json.dumps(pairs, indent=indent))


@cli.command("env", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(ENV_FORMAT_CHOICES, case_sensitive=False),
    default="shell",
    show_default=True,
    help="Shell export lines or a JSON object",
)
@click.pass_context
def cli_env(ctx: click.Context, output_format: str) -> None:
    """Print the key space as environment variables."""

    values = _interface(ctx).as_env()
    if output_format.lower() == "json":
        click.echo(json.dumps(values, indent=2, sort_keys=True))
        return
    for name in sorted(values):
        click.echo(f"export {name}={shlex.quote(values[name])}")


@cli.command("sources", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_sources(ctx: click.Context) -> None:
    """List sources in the order lookups consult them."""

    for source in _interface(ctx).sources:
        click.echo(repr(source))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_cmdb",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
