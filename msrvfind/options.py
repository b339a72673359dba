"""Choices offered to the user: output formats, release sources, editions and the like."""

from __future__ import annotations

import enum

from msrvfind.errors import CargoMsrvError
from msrvfind.manifest import RustVersion


class _Choice(enum.Enum):
    """An enumeration whose members are written as their text value."""

    def __str__(self) -> str:
        return self.value


class OutputFormat(_Choice):
    """How user output is presented."""

    HUMAN = "human"
    JSON = "json"
    MINIMAL = "minimal"
    NONE = "none"

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """Parse a user-selectable format; 'none' is not selectable by name."""
        if text in ("human", "json", "minimal"):
            return cls(text)
        raise CargoMsrvError(f"Given output format '{text}' is not valid")


class ReleaseSource(_Choice):
    """Where the index of Rust releases is obtained from."""

    RUST_CHANGELOG = "rust-changelog"

    @classmethod
    def parse(cls, text: str) -> "ReleaseSource":
        """Parse a release source by name."""
        for source in cls:
            if source.value == text:
                return source
        raise CargoMsrvError(f"Unable to parse rust-releases source from '{text}'")


class SearchMethod(_Choice):
    """How the search space of Rust releases is explored."""

    LINEAR = "linear"
    BISECT = "bisect"


class TracingTargetOption(_Choice):
    """Where log output is written."""

    FILE = "file"
    STDOUT = "stdout"

    @classmethod
    def parse(cls, text: str) -> "TracingTargetOption":
        """Parse a log target by name."""
        for target in cls:
            if target.value == text:
                return target
        raise CargoMsrvError(f"Given log target '{text}' is not valid")


class ListMsrvVariant(_Choice):
    """What the list subcommand reports."""

    DIRECT_DEPS = "direct-deps"
    ORDERED_BY_MSRV = "ordered-by-msrv"

    @classmethod
    def parse(cls, text: str) -> "ListMsrvVariant":
        """Parse a list variant by name."""
        for variant in cls:
            if variant.value == text:
                return variant
        raise CargoMsrvError(f"No such list variant '{text}'")


class ParseEditionError(CargoMsrvError, ValueError):
    """The given text names no supported Rust edition."""

    def __init__(self, edition: str) -> None:
        self.edition = edition
        super().__init__(f"Edition '{edition}' is not supported")


class Edition(_Choice):
    """A Rust edition."""

    EDITION_2015 = "2015"
    EDITION_2018 = "2018"
    EDITION_2021 = "2021"

    @classmethod
    def parse(cls, text: str) -> "Edition":
        """Parse an edition from its year."""
        for edition in cls:
            if edition.value == text:
                return edition
        raise ParseEditionError(text)

    def as_version(self) -> RustVersion:
        """The first Rust release that supports this edition."""
        return _EDITION_VERSIONS[self]


_EDITION_VERSIONS = {
    Edition.EDITION_2015: (1, 0, 0),
    Edition.EDITION_2018: (1, 31, 0),
    Edition.EDITION_2021: (1, 56, 0),
}

DEFAULT_OUTPUT_FORMAT = OutputFormat.HUMAN
DEFAULT_RELEASE_SOURCE = ReleaseSource.RUST_CHANGELOG
DEFAULT_SEARCH_METHOD = SearchMethod.BISECT
DEFAULT_TRACING_TARGET = TracingTargetOption.FILE
DEFAULT_LIST_VARIANT = ListMsrvVariant.ORDERED_BY_MSRV