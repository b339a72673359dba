from pathlib import Path

import pytest

from msrvfind.cli import (
    CargoMsrvOpts,
    ListOpts,
    SetOpts,
    ShowOpts,
    VerifyOpts,
    build_parser,
    modify_args,
    parse_args,
)
from msrvfind.log_level import LogLevel
from msrvfind.options import (
    ListMsrvVariant,
    OutputFormat,
    ReleaseSource,
    TracingTargetOption,
)


# Cases carried over from the source's own tests.


def test_has_bisect():
    opts = parse_args(["cargo", "msrv", "--bisect"])
    assert opts.find_opts.bisect
    assert not opts.find_opts.linear


def test_has_not_bisect():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.bisect


def test_has_linear():
    opts = parse_args(["cargo", "msrv", "--linear"])
    assert opts.find_opts.linear
    assert not opts.find_opts.bisect


def test_has_not_linear():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.linear


def test_has_write_toolchain_file():
    opts = parse_args(["cargo", "msrv", "--write-toolchain-file"])
    assert opts.find_opts.write_toolchain_file


def test_has_not_write_toolchain_file():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.write_toolchain_file


def test_has_ignore_lockfile():
    opts = parse_args(["cargo", "msrv", "--ignore-lockfile"])
    assert opts.find_opts.ignore_lockfile


def test_has_not_ignore_lockfile():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.ignore_lockfile


def test_has_no_check_feedback():
    opts = parse_args(["cargo", "msrv", "--no-check-feedback"])
    assert opts.find_opts.no_check_feedback


def test_has_not_no_check_feedback():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.no_check_feedback


def test_has_write_msrv():
    opts = parse_args(["cargo", "msrv", "--write-msrv"])
    assert opts.find_opts.write_msrv


def test_has_not_write_msrv():
    opts = parse_args(["cargo", "msrv"])
    assert not opts.find_opts.write_msrv


# Further behaviour.


def test_build_parser_requires_msrv_command():
    parser = build_parser()
    namespace = parser.parse_args(["msrv"])
    assert namespace.cargo_command == "msrv"
    with pytest.raises(SystemExit):
        parser.parse_args([])


@pytest.mark.parametrize(
    "args, expected",
    [
        (["cargo-msrv"], ["cargo-msrv"]),
        (["cargo-msrv", "--bisect"], ["cargo", "msrv", "--bisect"]),
        (["cargo-msrv", "msrv", "--bisect"], ["cargo", "msrv", "--bisect"]),
        (["/usr/bin/cargo-msrv", "show"], ["cargo", "msrv", "show"]),
        (["cargo-msrv.exe", "list"], ["cargo", "msrv", "list"]),
        (["cargo", "msrv", "list"], ["cargo", "msrv", "list"]),
    ],
)
def test_modify_args(args, expected):
    assert modify_args(args) == expected


def test_standalone_program_name_parses():
    opts = parse_args(["cargo-msrv", "--linear"])
    assert opts.find_opts.linear


def test_bisect_and_linear_conflict():
    with pytest.raises(SystemExit) as info:
        parse_args(["cargo", "msrv", "--bisect", "--linear"])
    assert info.value.code == 2


def test_toolchain_file_alias():
    opts = parse_args(["cargo", "msrv", "--toolchain-file"])
    assert opts.find_opts.write_toolchain_file


def test_defaults():
    opts = parse_args(["cargo", "msrv"])
    assert opts == CargoMsrvOpts()
    assert opts.shared_opts.user_output_opts.output_format is OutputFormat.HUMAN
    assert opts.shared_opts.debug_output_opts.log_target is TracingTargetOption.FILE
    assert opts.shared_opts.debug_output_opts.log_level is LogLevel.INFO
    assert opts.find_opts.rust_releases_opts.release_source is ReleaseSource.RUST_CHANGELOG
    assert opts.subcommand is None


def test_custom_check_command_for_find():
    opts = parse_args(["cargo", "msrv", "--linear", "--", "cargo", "test", "--all"])
    assert opts.find_opts.custom_check_opts.custom_check_command == [
        "cargo",
        "test",
        "--all",
    ]


def test_min_as_edition():
    opts = parse_args(["cargo", "msrv", "--min", "2018"])
    assert opts.find_opts.rust_releases_opts.min == (1, 31, 0)


def test_min_as_version_and_max():
    opts = parse_args(["cargo", "msrv", "--minimum", "1.40", "--max", "1.50.1"])
    assert opts.find_opts.rust_releases_opts.min == (1, 40)
    assert opts.find_opts.rust_releases_opts.max == (1, 50, 1)


@pytest.mark.parametrize("value", ["x", "1", "1.0.0-nightly", "2000"])
def test_invalid_min(value):
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "--min", value])


def test_include_all_patch_releases_and_target():
    opts = parse_args(
        ["cargo", "msrv", "--include-all-patch-releases", "--target", "x86_64-unknown-linux-gnu"]
    )
    assert opts.find_opts.rust_releases_opts.include_all_patch_releases
    assert opts.find_opts.toolchain_opts.target == "x86_64-unknown-linux-gnu"


def test_invalid_release_source():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "--release-source", "nowhere"])


def test_output_format_json():
    opts = parse_args(["cargo", "msrv", "--output-format", "json"])
    assert opts.shared_opts.user_output_opts.output_format is OutputFormat.JSON


def test_output_format_none_is_not_selectable():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "--output-format", "none"])


def test_shared_options_after_subcommand():
    opts = parse_args(
        ["cargo", "msrv", "show", "--no-log", "--log-level", "debug", "--path", "crate"]
    )
    assert opts.subcommand == ShowOpts()
    assert opts.shared_opts.debug_output_opts.no_log
    assert opts.shared_opts.debug_output_opts.log_level is LogLevel.DEBUG
    assert opts.shared_opts.path == Path("crate")


def test_shared_options_before_subcommand_are_kept():
    opts = parse_args(
        ["cargo", "msrv", "--no-user-output", "--log-target", "stdout", "list"]
    )
    assert opts.shared_opts.user_output_opts.no_user_output
    assert opts.shared_opts.debug_output_opts.log_target is TracingTargetOption.STDOUT
    assert opts.subcommand == ListOpts(ListMsrvVariant.ORDERED_BY_MSRV)


def test_path_conflicts_with_manifest_path():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "--path", "a", "--manifest-path", "a/Cargo.toml"])


def test_manifest_path():
    opts = parse_args(["cargo", "msrv", "--manifest-path", "a/Cargo.toml"])
    assert opts.shared_opts.manifest_path == Path("a/Cargo.toml")
    assert opts.shared_opts.path is None


def test_list_variant():
    opts = parse_args(["cargo", "msrv", "list", "--variant", "direct-deps"])
    assert opts.subcommand == ListOpts(ListMsrvVariant.DIRECT_DEPS)


def test_list_invalid_variant():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "list", "--variant", "everything"])


def test_set_msrv():
    opts = parse_args(["cargo", "msrv", "set", "1.56"])
    assert opts.subcommand == SetOpts((1, 56))


@pytest.mark.parametrize("args", [["set"], ["set", "1.56-nightly"], ["set", "one"]])
def test_set_invalid(args):
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", *args])


def test_verify_options():
    opts = parse_args(
        [
            "cargo",
            "msrv",
            "verify",
            "--rust-version",
            "1.60.0",
            "--target",
            "wasm32-unknown-unknown",
            "--min",
            "2021",
            "--",
            "cargo",
            "build",
        ]
    )
    verify = opts.subcommand
    assert isinstance(verify, VerifyOpts)
    assert verify.rust_version == (1, 60, 0)
    assert verify.toolchain_opts.target == "wasm32-unknown-unknown"
    assert verify.rust_releases_opts.min == (1, 56, 0)
    assert verify.custom_check.custom_check_command == ["cargo", "build"]
    assert opts.find_opts.custom_check_opts.custom_check_command == []
    assert opts.find_opts.toolchain_opts.target is None


def test_find_options_kept_with_verify():
    opts = parse_args(["cargo", "msrv", "--min", "1.40", "verify"])
    assert opts.find_opts.rust_releases_opts.min == (1, 40)
    assert opts.subcommand.rust_releases_opts.min is None
    assert opts.subcommand.rust_version is None


def test_custom_check_not_allowed_for_show():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "show", "--", "cargo", "check"])


def test_log_level_is_case_sensitive_choice():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "msrv", "--log-level", "verbose"])


def test_wrong_top_level_command():
    with pytest.raises(SystemExit):
        parse_args(["cargo", "build"])