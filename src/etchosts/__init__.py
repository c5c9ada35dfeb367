import click
from etchosts import config
from etchosts.hosts import build, build_no_ipv6, add, update, delete, read
from etchosts.errors import InvalidRecord
from etchosts.record import Record
from etchosts.constants import STATUS_WRITTEN, STATUS_FAILED, STATUS_READ_FAILED
from etchosts.logger import logger
from importlib.metadata import version, PackageNotFoundError
from pydantic import ValidationError
import ipaddress
import sys
import json
import pathlib


def _version() -> str:
    try:
        return version("etchosts")
    except PackageNotFoundError:
        return "unknown"


def _run(operation, *args) -> None:
    """Runs an operation, reporting failures the same way for every command."""
    hosts_file = click.get_current_context().obj["hosts_file"]
    try:
        operation(hosts_file, *args)
    except (InvalidRecord, OSError) as e:
        print(f"{STATUS_FAILED}: {e}")
        sys.exit(1)
    logger.info(f"{STATUS_WRITTEN}: {hosts_file}")


def _make_record(address: str, names) -> Record:
    try:
        return Record(address=address, hosts=list(names))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        print(f"{STATUS_FAILED}: {problems}")
        sys.exit(1)


def _is_address(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def _parse_entry(entry: str) -> Record:
    """Parses ADDRESS=NAMES as given to build --entry."""
    address, sep, names = entry.partition("=")
    if not sep:
        print(f"{STATUS_FAILED}: entry {entry} must look like ADDRESS=NAME[,NAME...]")
        sys.exit(1)
    return _make_record(address, names.replace(",", " ").split())


# Default arguments for all commands.
@click.group()
@click.version_option(package_name="etchosts", prog_name="etchosts", version=_version())
@click.option(
    "--hosts-file",
    "-f",
    "hosts_file",
    envvar="ETCHOSTS_HOSTS_FILE",
    type=click.Path(
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        path_type=pathlib.Path,
    ),
    default=config.HOSTS_FILE_PATH,
    show_default=True,
    help="Path to the hosts file.",
)
@click.pass_context
def cli(ctx, hosts_file: pathlib.Path) -> None:
    ctx.ensure_object(dict)
    ctx.obj["hosts_file"] = hosts_file


@cli.command(
    name="build",
    help="Overwrite the hosts file with the default entries followed by the given ones."
)
@click.option(
    "--no-ipv6",
    help="Only write IPv4 entries, dropping IPv6 defaults and records.",
    is_flag=True,
    default=False,
)
@click.option(
    "--records",
    "records_file",
    type=click.Path(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        path_type=pathlib.Path,
    ),
    default=None,
    help="YAML file holding a list of {address, hosts} entries.",
)
@click.option(
    "--entry",
    "-e",
    "entries",
    multiple=True,
    help="Extra entry as ADDRESS=NAME[,NAME...]. May be repeated.",
)
def build_cmd(no_ipv6: bool, records_file: pathlib.Path | None, entries: tuple) -> None:
    records: list[Record] = []
    if records_file is not None:
        try:
            records += config.load_records(records_file)
        except InvalidRecord as e:
            print(f"{STATUS_FAILED}: {e}")
            sys.exit(1)
    records += [_parse_entry(entry) for entry in entries]
    _run(build_no_ipv6 if no_ipv6 else build, records)


@cli.command(name="add", help="Append an entry mapping ADDRESS to one or more NAMES.")
@click.argument("address", type=str, required=True)
@click.argument("names", type=str, nargs=-1, required=True)
def add_cmd(address: str, names: tuple) -> None:
    _run(add, [_make_record(address, names)])


@cli.command(name="update", help="Point every entry that lists NAME at ADDRESS.")
@click.argument("address", type=str, required=True)
@click.argument("name", type=str, required=True)
def update_cmd(address: str, name: str) -> None:
    _run(update, address, name)


@cli.command(
    name="delete",
    help="Remove the entries whose host names are exactly NAMES. A leading address is accepted and ignored."
)
@click.argument("names", type=str, nargs=-1, required=True)
def delete_cmd(names: tuple) -> None:
    # Matching is on names only, the address is a placeholder unless given.
    address, hosts = "0.0.0.0", list(names)
    if len(hosts) > 1 and _is_address(hosts[0]):
        address, hosts = hosts[0], hosts[1:]
    _run(delete, [_make_record(address, hosts)])


@cli.command(help="Print the entries of the hosts file as JSON.")
def show() -> None:
    hosts_file = click.get_current_context().obj["hosts_file"]
    try:
        records = read(hosts_file)
    except OSError as e:
        print(f"{STATUS_READ_FAILED}: {e}")
        sys.exit(1)
    print(json.dumps([r.model_dump(mode="json") for r in records], indent=4))
