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
Generation of the ordering service's genesis block with configtxgen.
"""
from typing import List, Optional

from .base import ToolProvisioner
from ..RUNNERS.container_runner import ContainerRunner
from ..UTILS.layout import GENESIS_BLOCK_FILE

OUTPUT_MOUNT = "/genesis"

# Fixed: the generated network always has exactly this one channel.
GENESIS_PROFILE = "SampleDevModeSolo"
CHANNEL_ID = "firefly"


class GenesisBlockProvisioner(ToolProvisioner):
    """
    Runs configtxgen -outputBlock writing genesis_block.pb into the
    output directory.
    """
    tool = "configtxgen"

    def build_argv(self, output_path: str) -> List[str]:
        return [
            "run", "--rm",
            "-v", f"{output_path}:{OUTPUT_MOUNT}",
            self.image,
            "configtxgen",
            "-outputBlock", f"{OUTPUT_MOUNT}/{GENESIS_BLOCK_FILE}",
            "-profile", GENESIS_PROFILE,
            "-channelID", CHANNEL_ID,
        ]

    def generate(self, output_path: str, verbose: bool = False) -> None:
        """
        Generates the genesis block under output_path.

        :param output_path: Directory mounted read-write into the tool.
        :param verbose: Stream tool output and log the command line.
        :raises ProvisioningFailure: If configtxgen cannot start or exits non-zero.
        """
        self._invoke(output_path, self.build_argv(output_path), verbose)


def generate_genesis_block(output_path: str,
                           runner: Optional[ContainerRunner] = None,
                           verbose: bool = False) -> None:
    GenesisBlockProvisioner(runner).generate(output_path, verbose=verbose)
