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
Builds the ordered service definitions for a stack's Fabric network.

Output order is fixed: certificate authority, orderer, peer, then one
connector per member in member order. The result depends only on the
stack and the stacks root, so building twice gives equal definitions.
"""
from typing import Dict, List

from ..config import DEFAULT_STACKS_DIR
from ..MODELS.service_definition import Service, ServiceDefinition, VolumeMount
from ..MODELS.stack import Stack
from ..UTILS import layout
from .connectors import ConnectorFactory, bare_connector, connector_service_name

CA_SERVICE = layout.CA_SERVICE_NAME
ORDERER_SERVICE = layout.ORDERER_FQDN
PEER_SERVICE = layout.PEER_FQDN

CA_IMAGE = "hyperledger/fabric-ca:latest"
ORDERER_IMAGE = "hyperledger/fabric-orderer:latest"
PEER_IMAGE = "hyperledger/fabric-peer:latest"

CA_PORT = 7054
CA_OPERATIONS_PORT = 17054
ORDERER_PORT = 7050
ORDERER_ADMIN_PORT = 7053
ORDERER_OPERATIONS_PORT = 17050
PEER_PORT = 7051
PEER_CHAINCODE_PORT = 7052
PEER_OPERATIONS_PORT = 17051

FABRIC_WORKING_DIR = "/opt/gopath/src/github.com/hyperledger/fabric"

ORDERER_HOME = "/var/hyperledger/orderer"
ORDERER_LEDGER = "/var/hyperledger/production/orderer"
PEER_HOME = "/etc/hyperledger/fabric"
PEER_LEDGER = "/var/hyperledger/production"

# Docker network the peer launches chaincode containers into
CHAINCODE_NETWORK = "fabric_test"


def _published(*ports: int) -> List[str]:
    return [f"{p}:{p}" for p in ports]


def _orderer_tls_env() -> Dict[str, str]:
    cert = f"{ORDERER_HOME}/tls/server.crt"
    key = f"{ORDERER_HOME}/tls/server.key"
    root_cas = f"[{ORDERER_HOME}/tls/ca.crt]"
    return {
        "ORDERER_GENERAL_TLS_ENABLED": "true",
        "ORDERER_GENERAL_TLS_PRIVATEKEY": key,
        "ORDERER_GENERAL_TLS_CERTIFICATE": cert,
        "ORDERER_GENERAL_TLS_ROOTCAS": root_cas,
        "ORDERER_GENERAL_CLUSTER_CLIENTCERTIFICATE": cert,
        "ORDERER_GENERAL_CLUSTER_CLIENTPRIVATEKEY": key,
        "ORDERER_GENERAL_CLUSTER_ROOTCAS": root_cas,
        "ORDERER_ADMIN_TLS_ENABLED": "true",
        "ORDERER_ADMIN_TLS_CERTIFICATE": cert,
        "ORDERER_ADMIN_TLS_PRIVATEKEY": key,
        "ORDERER_ADMIN_TLS_ROOTCAS": root_cas,
        "ORDERER_ADMIN_TLS_CLIENTROOTCAS": root_cas,
    }


def build_ca() -> ServiceDefinition:
    """
    The certificate authority for the peer organization.
    """
    return ServiceDefinition(
        service_name=CA_SERVICE,
        service=Service(
            image=CA_IMAGE,
            environment={
                "FABRIC_CA_HOME": "/etc/hyperledger/fabric-ca-server",
                "FABRIC_CA_SERVER_CA_NAME": "ca-org1",
                "FABRIC_CA_SERVER_TLS_ENABLED": "true",
                "FABRIC_CA_SERVER_PORT": str(CA_PORT),
                "FABRIC_CA_SERVER_OPERATIONS_LISTENADDRESS": f"0.0.0.0:{CA_OPERATIONS_PORT}",
            },
            # TODO: offset published ports per stack so stacks can share a host
            ports=_published(CA_PORT, CA_OPERATIONS_PORT),
            command="sh -c 'fabric-ca-server start -b admin:adminpw -d'",
        ),
    )


def build_orderer(stack_path: str) -> ServiceDefinition:
    """
    The solo ordering node. Genesis block and identity are bound read-only
    from the stack directory; ledger state lives in a volume named after
    the service.
    """
    environment = {
        "FABRIC_LOGGING_SPEC": "INFO",
        "ORDERER_GENERAL_LISTENADDRESS": "0.0.0.0",
        "ORDERER_GENERAL_LISTENPORT": str(ORDERER_PORT),
        "ORDERER_GENERAL_LOCALMSPID": layout.ORDERER_MSP_ID,
        "ORDERER_GENERAL_LOCALMSPDIR": f"{ORDERER_HOME}/msp",
        "ORDERER_KAFKA_TOPIC_REPLICATIONFACTOR": "1",
        "ORDERER_KAFKA_VERBOSE": "true",
        "ORDERER_GENERAL_BOOTSTRAPMETHOD": "none",
        "ORDERER_CHANNELPARTICIPATION_ENABLED": "true",
        "ORDERER_ADMIN_LISTENADDRESS": f"0.0.0.0:{ORDERER_ADMIN_PORT}",
        "ORDERER_OPERATIONS_LISTENADDRESS": f"0.0.0.0:{ORDERER_OPERATIONS_PORT}",
    }
    environment.update(_orderer_tls_env())

    return ServiceDefinition(
        service_name=ORDERER_SERVICE,
        service=Service(
            image=ORDERER_IMAGE,
            environment=environment,
            working_dir=FABRIC_WORKING_DIR,
            command="orderer",
            volumes=[
                VolumeMount(source=layout.genesis_block_path(stack_path),
                            target=f"{ORDERER_HOME}/orderer.genesis.block", read_only=True),
                VolumeMount(source=layout.orderer_msp_path(stack_path),
                            target=f"{ORDERER_HOME}/msp", read_only=True),
                VolumeMount(source=layout.orderer_tls_path(stack_path),
                            target=f"{ORDERER_HOME}/tls", read_only=True),
                VolumeMount(source=ORDERER_SERVICE, target=ORDERER_LEDGER, named=True),
            ],
            ports=_published(ORDERER_PORT, ORDERER_ADMIN_PORT, ORDERER_OPERATIONS_PORT),
        ),
        volume_names=[ORDERER_SERVICE],
    )


def build_peer(stack_path: str) -> ServiceDefinition:
    """
    The single peer. It gossips with itself as bootstrap and announces its
    own address as the external endpoint.
    """
    address = f"{PEER_SERVICE}:{PEER_PORT}"
    return ServiceDefinition(
        service_name=PEER_SERVICE,
        service=Service(
            image=PEER_IMAGE,
            environment={
                "CORE_VM_ENDPOINT": "unix:///host/var/run/docker.sock",
                "CORE_VM_DOCKER_HOSTCONFIG_NETWORKMODE": CHAINCODE_NETWORK,
                "FABRIC_LOGGING_SPEC": "INFO",
                "CORE_PEER_TLS_ENABLED": "true",
                "CORE_PEER_PROFILE_ENABLED": "false",
                "CORE_PEER_TLS_CERT_FILE": f"{PEER_HOME}/tls/server.crt",
                "CORE_PEER_TLS_KEY_FILE": f"{PEER_HOME}/tls/server.key",
                "CORE_PEER_TLS_ROOTCERT_FILE": f"{PEER_HOME}/tls/ca.crt",
                "CORE_PEER_ID": PEER_SERVICE,
                "CORE_PEER_ADDRESS": address,
                "CORE_PEER_LISTENADDRESS": f"0.0.0.0:{PEER_PORT}",
                "CORE_PEER_CHAINCODEADDRESS": f"{PEER_SERVICE}:{PEER_CHAINCODE_PORT}",
                "CORE_PEER_CHAINCODELISTENADDRESS": f"0.0.0.0:{PEER_CHAINCODE_PORT}",
                "CORE_PEER_GOSSIP_BOOTSTRAP": address,
                "CORE_PEER_GOSSIP_EXTERNALENDPOINT": address,
                "CORE_PEER_LOCALMSPID": layout.PEER_MSP_ID,
                "CORE_OPERATIONS_LISTENADDRESS": f"0.0.0.0:{PEER_OPERATIONS_PORT}",
            },
            volumes=[
                VolumeMount(source=layout.peer_msp_path(stack_path), target=f"{PEER_HOME}/msp", read_only=True),
                VolumeMount(source=layout.peer_tls_path(stack_path), target=f"{PEER_HOME}/tls", read_only=True),
                VolumeMount(source=PEER_SERVICE, target=PEER_LEDGER, named=True),
            ],
            depends_on=[ORDERER_SERVICE],
        ),
        volume_names=[PEER_SERVICE],
    )


def build_topology(stack: Stack,
                   stacks_root: str = DEFAULT_STACKS_DIR,
                   connector_factory: ConnectorFactory = bare_connector) -> List[ServiceDefinition]:
    """
    Builds every service definition for the stack.

    :param stack: The stack; member ids are assumed unique and non-empty.
    :param stacks_root: Root directory containing the stack's working directory.
    :param connector_factory: Configures the connector for each member.
    :return: CA, orderer, peer, then one connector per member, in member order.
    :raises ValueError: If the factory returns a definition under another name.
    """
    stack_path = layout.stack_dir(stacks_root, stack.name)

    definitions = [
        build_ca(),
        build_orderer(stack_path),
        build_peer(stack_path),
    ]

    for index, member in enumerate(stack.members):
        name = connector_service_name(member)
        definition = connector_factory(stack, member, index, name, stack_path)
        if definition.service_name != name:
            raise ValueError(
                f"connector factory returned {definition.service_name!r} for member {member.id!r}, expected {name!r}"
            )
        definitions.append(definition)

    return definitions
