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
Shared plumbing for provisioners that run a tool inside the fabric-tools image.
"""
import logging
from typing import List, Optional

from ..exceptions import ProvisioningFailure
from ..RUNNERS.container_runner import ContainerRunner, DockerRunner
from ..config import DEFAULT_TOOLS_IMAGE

logger = logging.getLogger(__name__)


class ToolProvisioner:
    """
    Runs a single containerized tool invocation through a ContainerRunner.

    One synchronous attempt per call: no retries, no timeout, and no cleanup
    of the output directory on failure.
    """
    tool = ""

    def __init__(self, runner: Optional[ContainerRunner] = None, image: str = DEFAULT_TOOLS_IMAGE):
        """
        Initializes the provisioner.

        :param runner: Container runner to invoke, defaults to the local docker CLI.
        :param image: Image providing the tool.
        """
        self.runner = runner or DockerRunner()
        self.image = image

    def _invoke(self, working_dir: str, argv: List[str], verbose: bool) -> None:
        """
        Runs the tool and raises ProvisioningFailure unless it exits zero.

        :param working_dir: Directory to run the container runtime in.
        :param argv: Full argument vector passed to the runtime.
        :param verbose: Stream tool output and log the command line.
        """
        logger.info("Running %s in %s", self.tool, self.image)
        try:
            exit_code = self.runner.run_command(working_dir, not verbose, verbose, *argv)
        except OSError as e:
            raise ProvisioningFailure(self.tool, argv, reason=str(e)) from e

        if exit_code != 0:
            raise ProvisioningFailure(self.tool, argv, exit_code=exit_code)
        logger.info("%s finished", self.tool)
