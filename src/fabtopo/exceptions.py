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
Errors raised by fabtopo.
"""
from typing import Optional, Sequence


class FabtopoError(Exception):
    """Base class for all fabtopo errors."""


class ProvisioningFailure(FabtopoError):
    """
    An external provisioning tool could not be started or exited non-zero.

    The output directory handed to the tool must be treated as untrustworthy
    after this is raised; nothing is cleaned up.
    """

    def __init__(self, tool: str, argv: Sequence[str], exit_code: Optional[int] = None, reason: str = ""):
        self.tool = tool
        self.argv = list(argv)
        self.exit_code = exit_code
        if exit_code is not None:
            message = f"{tool} exited with status {exit_code}"
        else:
            message = f"{tool} could not be started"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
