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
Factories producing the per-member connector service.

The topology builder only fixes a connector's name; the configuration that
makes it deployable comes from one of these factories.
"""
from typing import Callable

from ..MODELS.service_definition import Service, ServiceDefinition, VolumeMount
from ..MODELS.stack import Member, Stack
from ..UTILS import layout

# (stack, member, member index, derived service name, stack directory) -> definition
ConnectorFactory = Callable[[Stack, Member, int, str, str], ServiceDefinition]

FABCONNECT_IMAGE = "ghcr.io/hyperledger/firefly-fabconnect:latest"

# In-container locations, shared with CONVERTERS.to_fabconnect
FABCONNECT_HOME = "/fabconnect"
FABCONNECT_CONFIG = f"{FABCONNECT_HOME}/{layout.FABCONNECT_CONFIG_FILE}"
FABCONNECT_PROFILE = f"{FABCONNECT_HOME}/{layout.CONNECTION_PROFILE_FILE}"
FABCONNECT_RECEIPTS = f"{FABCONNECT_HOME}/receipts"
FABCONNECT_EVENTS = f"{FABCONNECT_HOME}/events"
CRYPTO_MOUNT = "/etc/firefly/organizations"
FABCONNECT_PORT = 3000


def connector_service_name(member: Member) -> str:
    return f"fabconnect_{member.id}"


def bare_connector(stack: Stack, member: Member, index: int, service_name: str, stack_path: str) -> ServiceDefinition:
    """
    A connector carrying only its name, to be configured downstream.
    """
    return ServiceDefinition(service_name=service_name)


class FabconnectConnectorFactory:
    """
    Configures each connector as a fabconnect gateway in front of the peer.

    The member's fabconnect.yaml, the shared connection profile naming the
    peer, orderer and CA, and the cryptogen tree are bound read-only from the
    stack directory; CONVERTERS.to_fabconnect writes the two files.
    Member index gets host port base_port + index so connectors for
    different members never collide.
    """

    def __init__(self, image: str = FABCONNECT_IMAGE, base_port: int = 5102):
        self.image = image
        self.base_port = base_port

    def __call__(self, stack: Stack, member: Member, index: int, service_name: str,
                 stack_path: str) -> ServiceDefinition:
        receipts = f"fabconnect_receipts_{member.id}"
        events = f"fabconnect_events_{member.id}"
        return ServiceDefinition(
            service_name=service_name,
            service=Service(
                image=self.image,
                command=f"-f {FABCONNECT_CONFIG}",
                environment={
                    "FABCONNECT_HTTP_PORT": str(FABCONNECT_PORT),
                    "FABCONNECT_RPC_CONFIGPATH": FABCONNECT_PROFILE,
                },
                ports=[f"{self.base_port + index}:{FABCONNECT_PORT}"],
                volumes=[
                    VolumeMount(source=layout.fabconnect_config_path(stack_path, member.id),
                                target=FABCONNECT_CONFIG, read_only=True),
                    VolumeMount(source=layout.connection_profile_path(stack_path),
                                target=FABCONNECT_PROFILE, read_only=True),
                    VolumeMount(source=layout.cryptogen_dir(stack_path), target=CRYPTO_MOUNT, read_only=True),
                    VolumeMount(source=receipts, target=FABCONNECT_RECEIPTS, named=True),
                    VolumeMount(source=events, target=FABCONNECT_EVENTS, named=True),
                ],
                depends_on=[layout.PEER_FQDN, layout.ORDERER_FQDN, layout.CA_SERVICE_NAME],
            ),
            volume_names=[receipts, events],
        )
