"""Dependency-respecting resolution order over an import graph."""

import heapq
from dataclasses import dataclass, field
from typing import Dict, List, Set

from .model import ImportGraph, SourceFile


@dataclass
class Cycle:
    """A strongly connected set of files that import one another."""

    members: List[SourceFile]

    @property
    def paths(self) -> List[str]:
        return [f.relative_path for f in self.members]


@dataclass
class Resolution:
    """
    Result of ordering an import graph.

    `order` lists every file exactly once, dependencies before dependents.
    `cycles` holds one entry per cyclic component, in scan order of its
    first member.
    """

    order: List[SourceFile] = field(default_factory=list)
    cycles: List[Cycle] = field(default_factory=list)

    def cyclic_files(self) -> Set[SourceFile]:
        return {f for cycle in self.cycles for f in cycle.members}


def strongly_connected_components(graph: ImportGraph) -> List[List[int]]:
    """
    Compute strongly connected components with an iterative Tarjan walk.

    Returns:
        Components as lists of node indices, each sorted by scan order.
    """
    count = len(graph)
    index_of: List[int] = [-1] * count
    lowlink: List[int] = [0] * count
    on_stack: List[bool] = [False] * count
    stack: List[int] = []
    components: List[List[int]] = []
    counter = 0

    for start in range(count):
        if index_of[start] != -1:
            continue
        # Each frame is (node, successors, next successor position)
        work = [(start, graph.successors(start), 0)]
        index_of[start] = lowlink[start] = counter
        counter += 1
        stack.append(start)
        on_stack[start] = True

        while work:
            node, succ, pos = work[-1]
            if pos < len(succ):
                work[-1] = (node, succ, pos + 1)
                nxt = succ[pos]
                if index_of[nxt] == -1:
                    index_of[nxt] = lowlink[nxt] = counter
                    counter += 1
                    stack.append(nxt)
                    on_stack[nxt] = True
                    work.append((nxt, graph.successors(nxt), 0))
                elif on_stack[nxt]:
                    lowlink[node] = min(lowlink[node], index_of[nxt])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
            if lowlink[node] == index_of[node]:
                component: List[int] = []
                while True:
                    member = stack.pop()
                    on_stack[member] = False
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component))

    return components


def resolve_order(graph: ImportGraph) -> Resolution:
    """
    Topologically order files so every import precedes its importer.

    Cyclic components do not abort ordering: edges inside a component are
    ignored, the component is placed after all of its outside dependencies,
    and its members keep scan order among themselves. Where no import
    constrains two files, scan order decides.

    Args:
        graph: Import graph built from the scanned files.

    Returns:
        Resolution with the full order and the detected cycles.
    """
    components = strongly_connected_components(graph)
    component_of: Dict[int, int] = {}
    for cid, members in enumerate(components):
        for member in members:
            component_of[member] = cid

    # Condensed graph: an edge dep -> importer for each cross-component import
    dependents: Dict[int, Set[int]] = {cid: set() for cid in range(len(components))}
    pending: Dict[int, int] = {cid: 0 for cid in range(len(components))}
    for importer in range(len(graph)):
        for imported in graph.successors(importer):
            a, b = component_of[imported], component_of[importer]
            if a != b and b not in dependents[a]:
                dependents[a].add(b)
                pending[b] += 1

    # Components are keyed by their first member's scan index
    ready = [(components[cid][0], cid) for cid in pending if pending[cid] == 0]
    heapq.heapify(ready)

    resolution = Resolution()
    while ready:
        _, cid = heapq.heappop(ready)
        members = components[cid]
        resolution.order.extend(graph.file_at(i) for i in members)
        for dependent in dependents[cid]:
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, (components[dependent][0], dependent))

    cyclic = [
        members for members in components
        if len(members) > 1 or members[0] in graph.successors(members[0])
    ]
    for members in sorted(cyclic, key=lambda m: m[0]):
        resolution.cycles.append(Cycle(members=[graph.file_at(i) for i in members]))

    return resolution
