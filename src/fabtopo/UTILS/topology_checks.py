"""
Static checks over a generated topology: names, dependencies and ports.
"""
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..MODELS.service_definition import ServiceDefinition


def _host_port(mapping: str) -> Optional[str]:
    # "host:container" or "ip:host:container"; a bare container port gets a random host port
    parts = mapping.split(':')
    return parts[-2] if len(parts) >= 2 else None


def ordered_startup(definitions: Sequence[ServiceDefinition]) -> List[str]:
    """
    Determines the order to start services using topological sort.

    Dependencies on services outside the topology are ignored.

    :param definitions: The generated service definitions.
    :return: Service names, each after the services it depends on.
    :raises ValueError: If a circular dependency is detected.
    """
    dependencies = {
        d.service_name: list(d.service.depends_on) if d.service else []
        for d in definitions
    }

    ordered = []
    visited = set()
    processing = set()

    def visit(name):
        if name in processing:
            raise ValueError(f"Circular dependency detected involving {name}")
        if name not in visited:
            processing.add(name)
            for dep in dependencies.get(name, []):
                if dep in dependencies:
                    visit(dep)
            processing.remove(name)
            visited.add(name)
            ordered.append(name)

    for name in dependencies:
        visit(name)

    return ordered


def check_topology(definitions: Sequence[ServiceDefinition]) -> List[str]:
    """
    Reports invariant violations in a topology. An empty list means the
    topology is consistent.

    :param definitions: The generated service definitions.
    :return: Human readable problem descriptions.
    """
    problems = []

    counts = Counter(d.service_name for d in definitions)
    for name, count in counts.items():
        if count > 1:
            problems.append(f"service name {name} used {count} times")

    names = set(counts)
    for d in definitions:
        if d.service is None:
            continue
        for dep in d.service.depends_on:
            if dep not in names:
                problems.append(f"{d.service_name}: depends on unknown service {dep}")

    try:
        ordered_startup(definitions)
    except ValueError as e:
        problems.append(str(e))

    published: Dict[str, str] = {}
    for d in definitions:
        if d.service is None:
            continue
        for mapping in d.service.ports:
            port = _host_port(mapping)
            if port is None:
                continue
            owner = published.get(port)
            if owner is not None and owner != d.service_name:
                problems.append(f"host port {port} published by both {owner} and {d.service_name}")
            else:
                published[port] = d.service_name

    return problems
