# msrvfind

`msrvfind` is a library of building blocks for working out the Minimum
Supported Rust Version (MSRV) of a Cargo crate. It reads the MSRV recorded in
a `Cargo.toml` manifest, parses `cargo msrv` style command-line arguments into
option objects, drives `rustup` through a small command builder, moves a
`Cargo.lock` out of the way and back, and builds a crate's dependency graph
from `cargo metadata`.

Reading manifests and parsing options needs nothing beyond Python. Running
`rustup` needs a working `rustup` installation, and resolving a dependency
graph needs `cargo`.

## Modules

| Module | Purpose |
| --- | --- |
| `msrvfind.manifest` | Read `package.rust-version` (or `package.metadata.msrv`) from a manifest |
| `msrvfind.cli` | Parse `cargo msrv` style arguments into option dataclasses |
| `msrvfind.options` | Output formats, release sources, search methods, log targets, editions and list variants |
| `msrvfind.log_level` | Log levels, by name or by number (`1` = error … `5` = trace) |
| `msrvfind.command` | `RustupCommand`, a builder for `rustup run`, `rustup install` and `rustup show` |
| `msrvfind.lockfile` | `LockfileHandler`, which moves `Cargo.lock` aside and restores it |
| `msrvfind.dependency_graph` | A crate's dependency graph, without dev-dependencies |
| `msrvfind.errors` | The exceptions raised by the package, and exit codes |

## Reading the MSRV from a manifest

```python
from msrvfind.manifest import CargoManifest

manifest = CargoManifest.parse("""
[package]
name = "some"
version = "0.1.0"
edition = "2018"
rust-version = "1.56"
""")
manifest.minimum_rust_version   # (1, 56)
```

`package.rust-version` is preferred; when it is absent, `package.metadata.msrv`
is used, whether `metadata` is a regular or an inline table. Versions are
tuples of two or three integers. A version must have two or three numeric
components; pre-release or build suffixes such as `1.56.0-nightly` raise
`msrvfind.manifest.ManifestParseError`. Text that is not valid TOML raises
`CargoMsrvError` from `parse_document`.

`find_minimum_rust_version(document)` returns the raw MSRV text of an
already parsed document, or `None`.

## Parsing command-line arguments

```python
from msrvfind.cli import parse_args

opts = parse_args(["cargo", "msrv", "--linear", "--path", "path/to/crate"])
opts.find_opts.linear        # True
opts.shared_opts.path        # PosixPath('path/to/crate')
opts.subcommand              # None
```

`parse_args` takes a full argument list, program name first, and returns a
`CargoMsrvOpts`. Arguments may be given as they arrive through Cargo
(`cargo msrv ...`) or as they arrive when started directly
(`cargo-msrv ...`); `modify_args` normalises both to the same form.

Without a subcommand the options describe a find run (`--bisect` or
`--linear`, `--write-toolchain-file`, `--ignore-lockfile`,
`--no-check-feedback`, `--write-msrv`, `--min`, `--max`,
`--include-all-patch-releases`, `--release-source`, `--target`). The
subcommands `list [--variant]`, `set <MSRV>`, `show` and
`verify [--rust-version]` produce `ListOpts`, `SetOpts`, `ShowOpts` and
`VerifyOpts`. `--min` accepts a version or an edition year, which stands for
the first Rust release supporting that edition.

Anything after `--` is kept as a custom check command: in
`find_opts.custom_check_opts` for a find run, or in the `VerifyOpts` for
`verify`; `list`, `set` and `show` reject it. `--path` and `--manifest-path`
cannot be used together. Invalid input is reported the way `argparse`
reports it, by exiting with status 2. `build_parser()` returns the underlying
`argparse` parser.

## Parsing smaller values

```python
from msrvfind.log_level import LogLevel
from msrvfind.options import Edition, OutputFormat

LogLevel.parse("DEBUG")            # case-insensitive names ...
LogLevel.parse("5")                # ... or numbers 1 to 5
Edition.parse("2018").as_version() # (1, 31, 0)
OutputFormat.parse("json")
```

Unknown values raise an exception that names the offending input.
`LogLevel.to_logging_level()` gives the matching level of the `logging`
module.

## Running rustup

```python
from msrvfind.command import RustupCommand, default_target

output = RustupCommand().with_args(["--profile", "minimal", "1.56.0"]).with_stderr().install()
output.success()
output.stderr

default_target()   # the host triple from the first line of `rustup show`
```

Output that is not captured with `with_stdout()` or `with_stderr()` is
discarded. Failing to start the process raises `msrvfind.errors.IoError`.
`parse_default_target(text)` extracts the host triple from text already
captured.

## Moving the lock file aside

```python
from msrvfind.lockfile import LockfileHandler

with LockfileHandler("path/to/crate/Cargo.lock"):
    ...   # Cargo.lock is renamed to Cargo.lock-ignored-for-cargo-msrv here
```

The file is moved back when the block ends. `move_lockfile()` and
`move_lockfile_back()` do the same steps by hand.

## Dependency graphs

```python
from msrvfind.dependency_graph import CargoMetadataResolver

graph = CargoMetadataResolver.from_manifest_path("path/to/crate/Cargo.toml").resolve()
graph.packages_from_root()
```

The resolver runs `cargo metadata --format-version 1` and keeps normal and
build dependencies only. `graph_from_metadata(metadata)` builds the same
graph from already decoded `cargo metadata` JSON.

## Errors and exit codes

Failures are raised as subclasses of `msrvfind.errors.CargoMsrvError`, and
`msrvfind.errors.ExitCode` gives process exit statuses: `SUCCESS` (0) and
`FAILURE` (1).

## What the package does not do

The package has no command to run and does not itself search for an MSRV. It
does not turn parsed options into a resolved run, does not check a crate
against a toolchain, does not fetch an index of Rust releases, and does not
write an MSRV or a toolchain file. Those steps are left to code built on the
pieces above.