"""The graph of packages a crate depends on, as resolved by `cargo metadata`."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Iterable, Mapping
from typing import Any

import networkx as nx

from msrvfind.errors import CargoMsrvError, IoError, IoErrorSource

_BUILD_KINDS = (None, "normal", "build")


class DependencyGraph:
    """A directed graph of packages, from a designated root crate to its dependencies."""

    def __init__(self, root_crate: str) -> None:
        self.root_crate = root_crate
        self._graph = nx.DiGraph()

    @classmethod
    def empty(cls, root_crate: str) -> "DependencyGraph":
        """A graph holding no packages at all."""
        return cls(root_crate)

    @property
    def graph(self) -> nx.DiGraph:
        """A read-only view of the underlying graph of package ids."""
        return self._graph.copy(as_view=True)

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._graph

    def package(self, package_id: str) -> Any:
        """The package data stored under the given id."""
        return self._graph.nodes[package_id]["package"]

    def dependencies(self, package_id: str) -> list[str]:
        """Ids of the packages the given package depends on directly."""
        return list(self._graph.successors(package_id))

    def add_package(self, package_id: str, package: Any) -> None:
        """Add a package, replacing any stored under the same id."""
        self._graph.add_node(package_id, package=package)

    def add_dependency(self, parent_id: str, child_id: str) -> None:
        """Record that one known package depends on another."""
        for package_id in (parent_id, child_id):
            if package_id not in self._graph:
                raise KeyError(package_id)
        self._graph.add_edge(parent_id, child_id)

    def packages_from_root(self) -> list[Any]:
        """Packages reachable from the root crate, in depth-first order."""
        if self.root_crate not in self._graph:
            return []
        return [
            self._graph.nodes[node]["package"]
            for node in nx.dfs_preorder_nodes(self._graph, self.root_crate)
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return (
            self.root_crate == other.root_crate
            and self.packages_from_root() == other.packages_from_root()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DependencyGraph(root_crate={self.root_crate!r}, packages={len(self)})"


def _is_build_relevant(dep: Mapping) -> bool:
    """Normal and build dependencies are needed to build a crate; dev ones are not."""
    return all(kind.get("kind") in _BUILD_KINDS for kind in dep.get("dep_kinds", []))


def build_package_graph(
    graph: DependencyGraph, packages: Iterable[Mapping], nodes: Iterable[Mapping]
) -> None:
    """Fill a graph from `cargo metadata` packages and resolved dependency nodes."""
    for package in packages:
        graph.add_package(package["id"], package)

    for node in nodes:
        for dep in node.get("deps", []):
            if _is_build_relevant(dep):
                graph.add_dependency(node["id"], dep["pkg"])


def _root_package_id(metadata: Mapping) -> str:
    resolve = metadata.get("resolve")
    if resolve and resolve.get("root") is not None:
        return resolve["root"]

    workspace_root = metadata.get("workspace_root")
    if workspace_root is not None:
        root_manifest = os.path.join(workspace_root, "Cargo.toml")
        for package in metadata.get("packages", []):
            if package.get("manifest_path") == root_manifest:
                return package["id"]

    raise CargoMsrvError("No crate root found for given crate")


def graph_from_metadata(metadata: Mapping) -> DependencyGraph:
    """Build the dependency graph from decoded `cargo metadata` output."""
    root = _root_package_id(metadata)
    resolve = metadata.get("resolve")
    if not resolve:
        return DependencyGraph.empty(root)

    graph = DependencyGraph(root)
    build_package_graph(graph, metadata.get("packages", []), resolve.get("nodes", []))
    return graph


class CargoMetadataResolver:
    """Resolves a crate's dependency graph by running `cargo metadata`."""

    def __init__(self, manifest_path: str | os.PathLike, program: str = "cargo") -> None:
        self.manifest_path = os.fspath(manifest_path)
        self.program = program

    @classmethod
    def from_manifest_path(cls, path: str | os.PathLike) -> "CargoMetadataResolver":
        """A resolver for the crate with the given Cargo.toml."""
        return cls(path)

    def resolve(self) -> DependencyGraph:
        """Run `cargo metadata` and build the graph from its output."""
        argv = [
            self.program,
            "metadata",
            "--format-version",
            "1",
            "--manifest-path",
            self.manifest_path,
        ]
        try:
            completed = subprocess.run(argv, capture_output=True, check=False)
        except OSError as exc:
            raise IoError(exc, IoErrorSource.SPAWN_PROCESS, self.program) from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise CargoMsrvError(f"`cargo metadata` exited with an error: {stderr}")

        try:
            metadata = json.loads(completed.stdout)
        except ValueError as exc:
            raise CargoMsrvError(
                f"Unable to decode the output of `cargo metadata`: {exc}"
            ) from exc

        return graph_from_metadata(metadata)