[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "msrvfind"
version = "0.1.0"
description = "Building blocks for working out the Minimum Supported Rust Version (MSRV) of a Cargo crate"
requires-python = ">=3.10"
keywords = ["rust", "cargo", "msrv", "rustup", "toolchain", "manifest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "tomlkit",
    "networkx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["msrvfind"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
