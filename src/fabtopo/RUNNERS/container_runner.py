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
Execution of container runtime commands on behalf of the provisioners.
"""
import logging
import subprocess
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class ContainerRunner(ABC):
    """
    Runs one container runtime command and reports its exit status.
    """

    @abstractmethod
    def run_command(self, working_dir: str, capture_output: bool, verbose: bool, *args: str) -> int:
        """
        Runs the container runtime with the given arguments.

        Args:
            working_dir (str): Directory to run the command in.
            capture_output (bool): Capture stdout/stderr instead of streaming them.
            verbose (bool): Log the full command line before running it.
            *args (str): Arguments passed to the runtime, e.g. ``run --rm ...``.

        Returns:
            int: The command's exit status.

        Raises:
            OSError: If the command could not be started.
        """


class DockerRunner(ContainerRunner):
    """
    Runs commands against the local docker CLI.
    """
    def __init__(self, docker_binary: str = "docker"):
        """
        Args:
            docker_binary (str): Executable name or path of the docker CLI.
        """
        self.docker_binary = docker_binary

    def run_command(self, working_dir: str, capture_output: bool, verbose: bool, *args: str) -> int:
        command = [self.docker_binary, *args]
        if verbose:
            logger.info("Running: %s (in %s)", " ".join(command), working_dir)
        else:
            logger.debug("Running: %s (in %s)", " ".join(command), working_dir)

        result = subprocess.run(
            command,
            cwd=working_dir,
            capture_output=capture_output,
            text=True,
            # Avoid shell=True for security reasons (CWE-78)
            shell=False,
        )

        if capture_output:
            if result.stdout:
                logger.debug("%s stdout:\n%s", self.docker_binary, result.stdout.rstrip())
            if result.returncode != 0 and result.stderr:
                logger.error("%s stderr:\n%s", self.docker_binary, result.stderr.rstrip())
        return result.returncode
