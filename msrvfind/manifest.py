"""Reading the minimum supported Rust version from a Cargo manifest."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import InlineTable

from msrvfind.errors import CargoMsrvError

_U64_MAX = 2**64 - 1

_VERSION_PATTERN = re.compile(
    r"([0-9]+)\.([0-9]+)(?:\.([0-9]+))?(?P<pre>-[^+]*)?(?P<build>\+.*)?"
)

RustVersion = Tuple[int, ...]
"""A two component (major, minor) or three component (major, minor, patch) version."""


class ManifestParseError(CargoMsrvError, ValueError):
    """The minimum Rust version found in a manifest is not a valid version."""

    def __init__(self, version: str, reason: str) -> None:
        self.version = version
        self.reason = reason
        super().__init__(
            "The minimum rust version in your manifest file could not be parsed: "
            f"{reason}"
        )


def _parse_rust_version(text: str) -> RustVersion:
    """Parse a bare two or three component version; modifiers are rejected."""
    match = _VERSION_PATTERN.fullmatch(text)
    if match is None:
        raise ManifestParseError(
            text,
            f"'{text}' is not a two or three component version (major.minor[.patch])",
        )
    if match.group("pre") is not None or match.group("build") is not None:
        raise ManifestParseError(
            text,
            f"'{text}' has a pre-release or build modifier, which is not allowed",
        )
    components = tuple(int(part) for part in match.groups()[:3] if part is not None)
    if any(component > _U64_MAX for component in components):
        raise ManifestParseError(
            text, f"a component of '{text}' is too large to be a version number"
        )
    return components


def parse_document(contents: str) -> tomlkit.TOMLDocument:
    """Parse the text of a Cargo manifest as a TOML document."""
    try:
        return tomlkit.parse(contents)
    except TOMLKitError as exc:
        raise CargoMsrvError(f"Unable to parse Cargo.toml: {exc}") from exc


def _as_table(item: Any) -> Optional[Mapping]:
    """A regular (non-inline) table, or None."""
    if isinstance(item, Mapping) and not isinstance(item, InlineTable):
        return item
    return None


def _as_table_like(item: Any) -> Optional[Mapping]:
    """A regular or inline table, or None."""
    return item if isinstance(item, Mapping) else None


def _as_str(item: Any) -> Optional[str]:
    return str(item) if isinstance(item, str) else None


def find_minimum_rust_version(document: Mapping) -> Optional[str]:
    """The MSRV text from `package.rust-version`, else from `package.metadata.msrv`."""
    package = _as_table(document.get("package"))
    if package is None:
        return None

    rust_version = _as_str(package.get("rust-version"))
    if rust_version is not None:
        return rust_version

    metadata = _as_table_like(package.get("metadata"))
    if metadata is None:
        return None
    return _as_str(metadata.get("msrv"))


@dataclass(frozen=True)
class CargoManifest:
    """The parts of a Cargo manifest that matter for finding the MSRV."""

    minimum_rust_version: Optional[RustVersion] = None

    @classmethod
    def from_document(cls, document: Mapping) -> "CargoManifest":
        """Build from a parsed manifest; raises ManifestParseError on a bad MSRV."""
        text = find_minimum_rust_version(document)
        if text is None:
            return cls(None)
        return cls(_parse_rust_version(text))

    @classmethod
    def parse(cls, contents: str) -> "CargoManifest":
        """Parse manifest text and extract the MSRV."""
        return cls.from_document(parse_document(contents))