"""Building blocks for working out the Minimum Supported Rust Version of a Cargo crate."""

__version__ = "0.1.0"