"""Dependency ordering for entity creation.

Pure graph algorithms over the foreign-key graph:
- Topological sort with an explicit tie-break priority (Kahn)
- Cycle extraction (DFS) for error reporting
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from ..exceptions import SchemaCycleError
from .utils import EntityDefinition, ForeignKeyDefinition


def _dependency_graph(
    entities: Sequence[EntityDefinition],
    foreign_keys: Iterable[ForeignKeyDefinition],
) -> dict[str, set[str]]:
    """Map each entity to the set of entities it references."""
    names = {e.name for e in entities}
    depends_on: dict[str, set[str]] = {e.name: set() for e in entities}

    for key in foreign_keys:
        # Self-references never constrain creation order
        if key.child_entity == key.parent_entity:
            continue
        if key.child_entity in names and key.parent_entity in names:
            depends_on[key.child_entity].add(key.parent_entity)

    return depends_on


def find_cycle(depends_on: dict[str, set[str]]) -> list[str]:
    """Return one dependency cycle as a path whose first node is repeated last.

    Returns an empty list when the graph is acyclic.
    """
    visited: set[str] = set()
    rec_stack: set[str] = set()

    def dfs(node: str, path: list[str]) -> list[str]:
        visited.add(node)
        rec_stack.add(node)
        path.append(node)

        for neighbor in sorted(depends_on.get(node, ())):
            if neighbor not in visited:
                cycle = dfs(neighbor, path)
                if cycle:
                    return cycle
            elif neighbor in rec_stack:
                start = path.index(neighbor)
                return path[start:] + [neighbor]

        rec_stack.remove(node)
        path.pop()
        return []

    for node in depends_on:
        if node not in visited:
            cycle = dfs(node, [])
            if cycle:
                return cycle

    return []


def dependency_order(
    entities: Sequence[EntityDefinition],
    foreign_keys: Iterable[ForeignKeyDefinition],
    priority: Sequence[str] = (),
) -> list[str]:
    """Order entity names so every referenced entity precedes its referrers.

    Among entities whose dependencies are all scheduled, the one listed first
    in `priority` goes next; entities missing from `priority` follow in their
    catalog order.

    Raises:
        SchemaCycleError: If the foreign-key graph contains a cycle
    """
    depends_on = _dependency_graph(entities, foreign_keys)

    catalog_position = {e.name: i for i, e in enumerate(entities)}
    rank = {name: i for i, name in enumerate(priority)}

    def sort_key(name: str) -> tuple[int, int]:
        return (rank.get(name, len(rank)), catalog_position[name])

    dependents: dict[str, set[str]] = defaultdict(set)
    remaining = {name: len(parents) for name, parents in depends_on.items()}
    for child, parents in depends_on.items():
        for parent in parents:
            dependents[parent].add(child)

    ready = sorted((name for name, count in remaining.items() if count == 0), key=sort_key)
    order: list[str] = []

    while ready:
        name = ready.pop(0)
        order.append(name)

        for child in dependents[name]:
            remaining[child] -= 1
            if remaining[child] == 0:
                ready.append(child)
        ready.sort(key=sort_key)

    if len(order) != len(depends_on):
        unresolved = {n: p for n, p in depends_on.items() if n not in order}
        cycle = find_cycle(unresolved) or sorted(unresolved)
        raise SchemaCycleError(cycle)

    return order
