# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Converter writing generated service definitions as a Docker Compose file.
"""
import logging
import os
from typing import Any, Dict, Sequence

import yaml

from ..MODELS.service_definition import ServiceDefinition

logger = logging.getLogger(__name__)

COMPOSE_VERSION = "2.1"


class ComposeConverter:
    """
    Renders a topology into a compose document, keeping emission order.
    """

    def __init__(self, definitions: Sequence[ServiceDefinition]):
        """
        :param definitions: Service definitions in the order they were built.
        """
        self.definitions = list(definitions)

    def _service_to_dict(self, definition: ServiceDefinition) -> Dict[str, Any]:
        svc = definition.service
        if svc is None:
            return {}

        out: Dict[str, Any] = {}
        if svc.image:
            out['image'] = svc.image
        if svc.command:
            out['command'] = svc.command
        if svc.working_dir:
            out['working_dir'] = svc.working_dir
        if svc.environment:
            out['environment'] = dict(svc.environment)
        if svc.ports:
            out['ports'] = list(svc.ports)
        if svc.volumes:
            out['volumes'] = [m.to_compose() for m in svc.volumes]
        if svc.depends_on:
            out['depends_on'] = list(svc.depends_on)
        return out

    def to_dict(self) -> Dict[str, Any]:
        """
        Builds the compose document.

        :return: Mapping with version, services and volumes.
        """
        services = {d.service_name: self._service_to_dict(d) for d in self.definitions}
        volumes = {}
        for d in self.definitions:
            for name in d.volume_names:
                volumes[name] = {}

        document: Dict[str, Any] = {'version': COMPOSE_VERSION, 'services': services}
        if volumes:
            document['volumes'] = volumes
        return document

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    def convert(self, output_path: str) -> str:
        """
        Writes the compose file.

        :param output_path: Destination file path.
        :return: The path written.
        """
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, 'w') as f:
            f.write(self.to_yaml())
        logger.info("Compose file written to %s", output_path)
        return output_path
