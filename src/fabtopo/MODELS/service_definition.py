"""
Models for generated services: the descriptor handed to the compose renderer,
its volume mounts, and the named volumes each service owns.
"""
from typing import List, Dict, Optional
from pydantic import BaseModel, model_validator


class VolumeMount(BaseModel):
    """
    Defines a mapping between a host path (or named volume) and a service path.

    ``named`` marks the source as a named volume; otherwise it is a host path,
    absolute or relative to the compose file.
    """
    source: str
    target: str
    read_only: bool = False
    named: bool = False

    @property
    def is_named(self) -> bool:
        return self.named

    def to_compose(self) -> str:
        """
        Renders the mount in compose short syntax.

        :return: ``source:target`` with ``:ro`` appended for read-only mounts.
        """
        source = self.source
        if not self.named and not (source.startswith('/') or source.startswith('.') or source.startswith('~')):
            # compose reads a bare relative source as a volume name
            source = f"./{source}"
        mount = f"{source}:{self.target}"
        if self.read_only:
            mount += ":ro"
        return mount


class Service(BaseModel):
    """
    The deployable part of a service definition.
    """
    image: Optional[str] = None
    command: Optional[str] = None
    working_dir: Optional[str] = None

    # Environment
    environment: Dict[str, str] = {}

    # Networking
    ports: List[str] = []  # "host:container"

    # Storage
    volumes: List[VolumeMount] = []

    # Lifecycle
    depends_on: List[str] = []


class ServiceDefinition(BaseModel):
    """
    One named unit of the generated topology.

    ``service`` is None for a connector that still needs configuring.
    ``volume_names`` lists the named volumes the service owns; every named
    mount in ``service.volumes`` must be declared there.
    """
    service_name: str
    service: Optional[Service] = None
    volume_names: List[str] = []

    @model_validator(mode='after')
    def _named_volumes_declared(self) -> "ServiceDefinition":
        if self.service is None:
            return self
        for mount in self.service.volumes:
            if mount.is_named and mount.source not in self.volume_names:
                raise ValueError(
                    f"service {self.service_name} mounts undeclared volume {mount.source}"
                )
        return self

    @property
    def named_mounts(self) -> List[VolumeMount]:
        if self.service is None:
            return []
        return [m for m in self.service.volumes if m.is_named]

    @property
    def bind_mounts(self) -> List[VolumeMount]:
        if self.service is None:
            return []
        return [m for m in self.service.volumes if not m.is_named]
