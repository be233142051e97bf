from __future__ import annotations

import logging
from collections.abc import Iterable

import networkx as nx

from dagwood.exceptions import DagwoodError, MalformedTreeError
from dagwood.models import Artifact, DependencyNode, MavenProject


logger = logging.getLogger(__name__)


def build_graph(projects: Iterable[MavenProject]) -> nx.MultiDiGraph:
    """Build a module graph where A -> B means A declares a dependency on B.

    Nodes are `group:artifact:version` ids; scanned projects carry their model in
    the `project` attribute. Each edge holds the declared `dependency` and its
    declaration `order`. A multigraph keeps e.g. a module's jar and test-jar
    dependency on the same sibling apart.
    """
    g = nx.MultiDiGraph()
    for proj in projects:
        a = proj.project.compact()
        if g.nodes.get(a, {}).get("project") is not None:
            logger.warning("Duplicate project %s, keeping the first one", a)
            continue
        g.add_node(a, project=proj)
        for order, dep in enumerate(proj.dependencies):
            b = dep.artifact.compact()
            g.add_node(b)
            g.add_edge(a, b, key=order, dependency=dep, order=order)
    logger.debug("Module graph: %d node(s), %d edge(s)", g.number_of_nodes(), g.number_of_edges())
    return g


def project_ids(g: nx.MultiDiGraph) -> list[str]:
    """Return ids of scanned projects, in the order they were added."""
    return [n for n, data in g.nodes(data=True) if data.get("project") is not None]


def default_root(g: nx.MultiDiGraph) -> str:
    """Pick the first scanned project that no other project depends on.

    Raises:
        DagwoodError: If every project is depended upon (or there are none).
    """
    for node_id in project_ids(g):
        if g.in_degree(node_id) == 0:
            return node_id
    raise DagwoodError("No root project found; pass one explicitly")


def _declared(g: nx.MultiDiGraph, node_id: str) -> list[dict]:
    edges = g.out_edges(node_id, data=True)
    return [data for _, _, data in sorted(edges, key=lambda e: e[2]["order"])]


def tree_from_graph(g: nx.MultiDiGraph, root_id: str) -> DependencyNode:
    """Unfold the module graph below `root_id` into a dependency tree.

    The root carries no dependency (label it with the project's coordinates).
    A module reached along several paths is unfolded once per path, each time
    as a fresh node. Only modules present in the graph are expanded; nothing is
    downloaded or resolved.

    Raises:
        DagwoodError: If `root_id` is not a node of the graph.
        MalformedTreeError: If a cycle is reachable from `root_id`.
    """
    if root_id not in g:
        raise DagwoodError(f"Unknown root project: {root_id}")

    try:
        cycle = nx.find_cycle(g, source=root_id)
    except nx.NetworkXNoCycle:
        cycle = None
    if cycle:
        chain = " -> ".join([str(u) for u, *_ in cycle] + [str(cycle[-1][1])])
        raise MalformedTreeError(f"Dependency cycle between modules: {chain}")

    root = DependencyNode()
    pending: list[tuple[str, DependencyNode]] = [(root_id, root)]
    while pending:
        node_id, node = pending.pop()
        for data in _declared(g, node_id):
            dep = data["dependency"]
            child = node.add(DependencyNode(dependency=dep.model_copy(deep=True)))
            pending.append((dep.artifact.compact(), child))
    return root


def project_artifact(g: nx.MultiDiGraph, root_id: str) -> Artifact | None:
    """Return the scanned project's coordinates (with packaging) for `root_id`."""
    proj = g.nodes[root_id].get("project") if root_id in g else None
    return proj.project if proj is not None else None
