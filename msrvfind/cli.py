"""Command line options of `cargo msrv` and their parsing."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, TypeVar, Union

from msrvfind.errors import CargoMsrvError
from msrvfind.log_level import DEFAULT_LOG_LEVEL, LogLevel
from msrvfind.manifest import RustVersion, _parse_rust_version
from msrvfind.options import (
    DEFAULT_LIST_VARIANT,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_RELEASE_SOURCE,
    DEFAULT_TRACING_TARGET,
    Edition,
    ListMsrvVariant,
    OutputFormat,
    ParseEditionError,
    ReleaseSource,
    TracingTargetOption,
)

_T = TypeVar("_T")

_MSRV_EPILOG = """\
You may provide a custom compatibility `check` command as the last argument (only
when this argument is provided via the double dash syntax, e.g. `$ cargo msrv -- custom
command`.
This custom check command will then be used to validate whether a Rust version is
compatible.
A custom `check` command should be runnable by rustup, as they will be passed on to
rustup like so: `rustup run <toolchain> <COMMAND...>`. NB: You only need to provide the
<COMMAND...> part.

By default, the custom check command is `cargo check`.
"""


@dataclass
class RustReleasesOpts:
    """Options that narrow down the set of Rust releases to consider."""

    min: Optional[RustVersion] = None
    max: Optional[RustVersion] = None
    include_all_patch_releases: bool = False
    release_source: ReleaseSource = DEFAULT_RELEASE_SOURCE


@dataclass
class ToolchainOpts:
    """Options for commands which invoke Rust toolchains."""

    target: Optional[str] = None


@dataclass
class CustomCheckOpts:
    """A custom check command, given after `--`."""

    custom_check_command: list[str] = field(default_factory=list)


@dataclass
class FindOpts:
    """Options of the top-level (find) command."""

    bisect: bool = False
    linear: bool = False
    write_toolchain_file: bool = False
    ignore_lockfile: bool = False
    no_check_feedback: bool = False
    write_msrv: bool = False
    rust_releases_opts: RustReleasesOpts = field(default_factory=RustReleasesOpts)
    toolchain_opts: ToolchainOpts = field(default_factory=ToolchainOpts)
    custom_check_opts: CustomCheckOpts = field(default_factory=CustomCheckOpts)


@dataclass
class UserOutputOpts:
    """Options controlling output meant for the user."""

    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    no_user_output: bool = False


@dataclass
class DebugOutputOpts:
    """Options controlling log output."""

    no_log: bool = False
    log_target: TracingTargetOption = DEFAULT_TRACING_TARGET
    log_level: LogLevel = DEFAULT_LOG_LEVEL


@dataclass
class SharedOpts:
    """Options shared between all subcommands."""

    path: Optional[Path] = None
    manifest_path: Optional[Path] = None
    user_output_opts: UserOutputOpts = field(default_factory=UserOutputOpts)
    debug_output_opts: DebugOutputOpts = field(default_factory=DebugOutputOpts)


@dataclass
class ListOpts:
    """Options of the `list` subcommand."""

    variant: ListMsrvVariant = DEFAULT_LIST_VARIANT


@dataclass
class SetOpts:
    """Options of the `set` subcommand."""

    msrv: RustVersion


@dataclass
class ShowOpts:
    """The `show` subcommand, which takes no options of its own."""


@dataclass
class VerifyOpts:
    """Options of the `verify` subcommand."""

    rust_releases_opts: RustReleasesOpts = field(default_factory=RustReleasesOpts)
    toolchain_opts: ToolchainOpts = field(default_factory=ToolchainOpts)
    custom_check: CustomCheckOpts = field(default_factory=CustomCheckOpts)
    rust_version: Optional[RustVersion] = None


SubCommandOpts = Union[ListOpts, SetOpts, ShowOpts, VerifyOpts]


@dataclass
class CargoMsrvOpts:
    """Everything given on the command line of `cargo msrv`."""

    find_opts: FindOpts = field(default_factory=FindOpts)
    shared_opts: SharedOpts = field(default_factory=SharedOpts)
    subcommand: Optional[SubCommandOpts] = None


def modify_args(args: Iterable[Union[str, os.PathLike]]) -> list[str]:
    """Normalise argv so that `cargo-msrv ...` parses the same as `cargo msrv ...`."""
    result = [os.fsdecode(arg) for arg in args]
    if len(result) >= 2:
        program = result[0]
        if program.endswith("cargo-msrv") or program.endswith("cargo-msrv.exe"):
            result[0] = "cargo"
            if result[1] != "msrv":
                result.insert(1, "msrv")
    return result


def _converter(parse: Callable[[str], _T], name: str) -> Callable[[str], _T]:
    """Wrap a parser so argparse reports its errors as invalid values."""

    def convert(text: str) -> _T:
        try:
            return parse(text)
        except CargoMsrvError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = name
    return convert


def _parse_log_level_choice(text: str) -> LogLevel:
    for level in LogLevel:
        if level.value == text:
            return level
    valid = ", ".join(level.value for level in LogLevel)
    raise CargoMsrvError(f"invalid log level '{text}' (possible values: {valid})")


def _parse_edition_or_version(text: str) -> RustVersion:
    """An edition resolves to the first Rust release that supports it."""
    try:
        return Edition.parse(text).as_version()
    except ParseEditionError as edition_error:
        try:
            return _parse_rust_version(text)
        except CargoMsrvError as version_error:
            raise CargoMsrvError(
                f"Value '{text}' could not be parsed as a valid Rust version: "
                f"{edition_error} + {version_error}"
            ) from version_error


_version = _converter(_parse_rust_version, "version")
_edition_or_version = _converter(_parse_edition_or_version, "version or edition")
_output_format = _converter(OutputFormat.parse, "output format")
_release_source = _converter(ReleaseSource.parse, "release source")
_log_target = _converter(TracingTargetOption.parse, "log target")
_log_level = _converter(_parse_log_level_choice, "log level")
_list_variant = _converter(ListMsrvVariant.parse, "list variant")


def _add_rust_releases_options(parser: argparse.ArgumentParser, prefix: str) -> None:
    group = parser.add_argument_group("Rust releases options")
    group.add_argument(
        "--min",
        "--minimum",
        dest=f"{prefix}min",
        type=_edition_or_version,
        default=None,
        metavar="VERSION_SPEC or EDITION",
        help="Least recent version or edition to take into account",
    )
    group.add_argument(
        "--max",
        "--maximum",
        dest=f"{prefix}max",
        type=_version,
        default=None,
        metavar="VERSION_SPEC",
        help="Most recent version to take into account",
    )
    group.add_argument(
        "--include-all-patch-releases",
        dest=f"{prefix}include_all_patch_releases",
        action="store_true",
        help="Include all patch releases, instead of only the last",
    )
    group.add_argument(
        "--release-source",
        dest=f"{prefix}release_source",
        type=_release_source,
        default=DEFAULT_RELEASE_SOURCE,
        metavar="SOURCE",
        help=f"Where to obtain Rust releases from (default: {DEFAULT_RELEASE_SOURCE})",
    )


def _add_toolchain_options(parser: argparse.ArgumentParser, prefix: str) -> None:
    group = parser.add_argument_group("Toolchain options")
    group.add_argument(
        "--target",
        dest=f"{prefix}target",
        default=None,
        metavar="TARGET",
        help="Check against a custom target (instead of the rustup default)",
    )


def _add_find_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("Find MSRV options")
    method = group.add_mutually_exclusive_group()
    method.add_argument(
        "--bisect",
        action="store_true",
        help="Use a binary search to find the MSRV (default)",
    )
    method.add_argument(
        "--linear",
        action="store_true",
        help="Use a linear search to find the MSRV",
    )
    group.add_argument(
        "--write-toolchain-file",
        "--toolchain-file",
        dest="write_toolchain_file",
        action="store_true",
        help="Pin the MSRV by writing the version to a rust-toolchain file",
    )
    group.add_argument(
        "--ignore-lockfile",
        action="store_true",
        help="Temporarily remove the lockfile, so it will not interfere with the build",
    )
    group.add_argument(
        "--no-check-feedback",
        action="store_true",
        help="Don't print the result of compatibility checks",
    )
    group.add_argument(
        "--write-msrv",
        action="store_true",
        help="Write the MSRV to the Cargo manifest",
    )
    _add_rust_releases_options(parser, "find_")
    _add_toolchain_options(parser, "find_")


def _add_shared_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    """Options accepted both before and after a subcommand."""

    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--path",
        type=Path,
        default=default(None),
        metavar="Crate Directory",
        help="Path to cargo project directory",
    )
    parser.add_argument(
        "--manifest-path",
        type=Path,
        default=default(None),
        metavar="Cargo Manifest",
        help="Path to cargo manifest file",
    )

    user_output = parser.add_argument_group("User output options")
    user_output.add_argument(
        "--output-format",
        type=_output_format,
        default=default(DEFAULT_OUTPUT_FORMAT),
        metavar="FORMAT",
        help="Set the format of user output (human, json, minimal)",
    )
    user_output.add_argument(
        "--no-user-output",
        action="store_true",
        default=default(False),
        help="Disable user output",
    )

    debug_output = parser.add_argument_group("Debug output options")
    debug_output.add_argument(
        "--no-log",
        action="store_true",
        default=default(False),
        help="Disable logging",
    )
    debug_output.add_argument(
        "--log-target",
        type=_log_target,
        default=default(DEFAULT_TRACING_TARGET),
        metavar="LOG TARGET",
        help="Specify where the program should output its logs (file, stdout)",
    )
    debug_output.add_argument(
        "--log-level",
        type=_log_level,
        default=default(DEFAULT_LOG_LEVEL),
        metavar="LEVEL",
        help="Specify the severity of logs which should be written",
    )


def build_parser() -> argparse.ArgumentParser:
    """The parser for `cargo msrv [OPTIONS] [SUBCOMMAND]`, without the `--` tail."""
    cargo = argparse.ArgumentParser(prog="cargo")
    commands = cargo.add_subparsers(dest="cargo_command", metavar="COMMAND")
    commands.required = True

    msrv = commands.add_parser(
        "msrv",
        help="Find your Minimum Supported Rust Version!",
        description="Find your Minimum Supported Rust Version!",
        epilog=_MSRV_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_find_options(msrv)
    _add_shared_options(msrv, suppress=False)

    subcommands = msrv.add_subparsers(dest="subcommand", metavar="SUBCOMMAND")

    list_parser = subcommands.add_parser(
        "list", help="Display the MSRV's of dependencies"
    )
    list_parser.add_argument(
        "--variant",
        type=_list_variant,
        default=DEFAULT_LIST_VARIANT,
        metavar="VARIANT",
        help="Display the MSRV's of crates that your crate depends on "
        "(direct-deps, ordered-by-msrv)",
    )
    _add_shared_options(list_parser, suppress=True)

    set_parser = subcommands.add_parser(
        "set", help="Set the MSRV of the current crate to a given Rust version"
    )
    set_parser.add_argument(
        "msrv",
        type=_version,
        metavar="MSRV",
        help="The version to be set as MSRV: a two- or three component Rust version",
    )
    _add_shared_options(set_parser, suppress=True)

    show_parser = subcommands.add_parser(
        "show",
        help="Show the MSRV of your crate, as specified in the Cargo manifest",
    )
    _add_shared_options(show_parser, suppress=True)

    verify_parser = subcommands.add_parser(
        "verify",
        help="Verify whether the MSRV is satisfiable",
    )
    _add_rust_releases_options(verify_parser, "verify_")
    _add_toolchain_options(verify_parser, "verify_")
    verify_parser.add_argument(
        "--rust-version",
        dest="verify_rust_version",
        type=_version,
        default=None,
        metavar="rust-version",
        help="The toolchain version to verify compatibility with; "
        "read from the Cargo manifest when not given",
    )
    _add_shared_options(verify_parser, suppress=True)

    return cargo


def _rust_releases_opts(namespace: argparse.Namespace, prefix: str) -> RustReleasesOpts:
    return RustReleasesOpts(
        min=getattr(namespace, f"{prefix}min"),
        max=getattr(namespace, f"{prefix}max"),
        include_all_patch_releases=getattr(
            namespace, f"{prefix}include_all_patch_releases"
        ),
        release_source=getattr(namespace, f"{prefix}release_source"),
    )


def _split_custom_check(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Separate the arguments before `--` from the custom check command after it."""
    args = list(args)
    if "--" in args:
        position = args.index("--")
        return args[:position], args[position + 1 :]
    return args, []


def parse_args(args: Iterable[Union[str, os.PathLike]]) -> CargoMsrvOpts:
    """Parse a full argv (program name first); exits with status 2 on bad input."""
    arguments = modify_args(args)
    parser = build_parser()
    options, custom_check = _split_custom_check(arguments[1:])
    namespace = parser.parse_args(options)

    if namespace.path is not None and namespace.manifest_path is not None:
        parser.error("the argument '--path' cannot be used with '--manifest-path'")

    subcommand_name = namespace.subcommand
    if custom_check and subcommand_name in ("list", "set", "show"):
        parser.error(
            f"unexpected argument '{custom_check[0]}': the '{subcommand_name}' "
            "subcommand takes no custom check command"
        )

    find_opts = FindOpts(
        bisect=namespace.bisect,
        linear=namespace.linear,
        write_toolchain_file=namespace.write_toolchain_file,
        ignore_lockfile=namespace.ignore_lockfile,
        no_check_feedback=namespace.no_check_feedback,
        write_msrv=namespace.write_msrv,
        rust_releases_opts=_rust_releases_opts(namespace, "find_"),
        toolchain_opts=ToolchainOpts(namespace.find_target),
        custom_check_opts=CustomCheckOpts(
            custom_check if subcommand_name is None else []
        ),
    )

    shared_opts = SharedOpts(
        path=namespace.path,
        manifest_path=namespace.manifest_path,
        user_output_opts=UserOutputOpts(
            output_format=namespace.output_format,
            no_user_output=namespace.no_user_output,
        ),
        debug_output_opts=DebugOutputOpts(
            no_log=namespace.no_log,
            log_target=namespace.log_target,
            log_level=namespace.log_level,
        ),
    )

    subcommand: Optional[SubCommandOpts]
    if subcommand_name == "list":
        subcommand = ListOpts(namespace.variant)
    elif subcommand_name == "set":
        subcommand = SetOpts(namespace.msrv)
    elif subcommand_name == "show":
        subcommand = ShowOpts()
    elif subcommand_name == "verify":
        subcommand = VerifyOpts(
            rust_releases_opts=_rust_releases_opts(namespace, "verify_"),
            toolchain_opts=ToolchainOpts(namespace.verify_target),
            custom_check=CustomCheckOpts(custom_check),
            rust_version=namespace.verify_rust_version,
        )
    else:
        subcommand = None

    return CargoMsrvOpts(find_opts, shared_opts, subcommand)