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
Generation of per-organization, per-node identities and TLS material with cryptogen.
"""
import os
from typing import List, Optional

from .base import ToolProvisioner
from ..RUNNERS.container_runner import ContainerRunner

# In-container mount points
TEMPLATE_MOUNT = "/etc/template.yml"
OUTPUT_MOUNT = "/output"


class CryptoMaterialProvisioner(ToolProvisioner):
    """
    Runs cryptogen generate against a template, writing the
    organization/node tree under the output directory.
    """
    tool = "cryptogen"

    def build_argv(self, config_path: str, output_path: str) -> List[str]:
        """
        Builds the container runtime argument vector.

        :param config_path: Path to the cryptogen template, mounted read-only.
        :param output_path: Directory receiving the generated material.
        :return: Arguments for ContainerRunner.run_command.
        """
        return [
            "run", "--rm",
            "-v", f"{config_path}:{TEMPLATE_MOUNT}:ro",
            "-v", f"{output_path}:{OUTPUT_MOUNT}",
            self.image,
            "cryptogen", "generate",
            "--config", TEMPLATE_MOUNT,
            "--output", OUTPUT_MOUNT,
        ]

    def generate(self, config_path: str, output_path: str, verbose: bool = False) -> None:
        """
        Generates crypto material. The output directory is not created here.

        :raises ProvisioningFailure: If cryptogen cannot start or exits non-zero.
        """
        argv = self.build_argv(config_path, output_path)
        self._invoke(os.path.dirname(config_path), argv, verbose)


def generate_crypto_material(config_path: str, output_path: str,
                             runner: Optional[ContainerRunner] = None,
                             verbose: bool = False) -> None:
    CryptoMaterialProvisioner(runner).generate(config_path, output_path, verbose=verbose)
