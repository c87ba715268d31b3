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
On-disk layout of a stack's blockchain material.

The provisioners write into this layout and the topology builder binds
paths out of it, so both sides must take their paths from here. Nothing in
this module touches the filesystem.

Layout under ``<stacks_root>/<stack_name>/blockchain/``::

    genesis_block.pb
    cryptogen.yaml
    cryptogen/ordererOrganizations/example.com/orderers/orderer.example.com/{msp,tls}
    cryptogen/peerOrganizations/org1.example.com/peers/peer0.org1.example.com/{msp,tls}
    ccp.yaml
    fabconnect/<member>/fabconnect.yaml
"""
import os
import posixpath

BLOCKCHAIN_DIR = "blockchain"
CRYPTOGEN_DIR = "cryptogen"
CRYPTOGEN_CONFIG_FILE = "cryptogen.yaml"
GENESIS_BLOCK_FILE = "genesis_block.pb"
CONNECTION_PROFILE_FILE = "ccp.yaml"
FABCONNECT_DIR = "fabconnect"
FABCONNECT_CONFIG_FILE = "fabconnect.yaml"

# cryptogen's top-level directories per organization kind
ORDERER_ORGANIZATIONS = "ordererOrganizations"
PEER_ORGANIZATIONS = "peerOrganizations"
ORDERER_NODES = "orderers"
PEER_NODES = "peers"

MSP_DIR = "msp"
TLS_DIR = "tls"
TLSCA_DIR = "tlsca"
USERS_DIR = "users"
ADMIN_USER = "Admin"

ORDERER_ORG_NAME = "Orderer"
ORDERER_ORG_DOMAIN = "example.com"
ORDERER_HOSTNAME = "orderer"
ORDERER_MSP_ID = "OrdererMSP"

PEER_ORG_NAME = "Org1"
PEER_ORG_DOMAIN = "org1.example.com"
PEER_HOSTNAME = "peer0"
PEER_MSP_ID = "Org1MSP"

# Compose service name of the peer organization's certificate authority
CA_SERVICE_NAME = "ca_org1"


def node_fqdn(hostname: str, org_domain: str) -> str:
    """
    Name cryptogen gives a node's directory, also used as its network address.
    """
    return f"{hostname}.{org_domain}"


ORDERER_FQDN = node_fqdn(ORDERER_HOSTNAME, ORDERER_ORG_DOMAIN)
PEER_FQDN = node_fqdn(PEER_HOSTNAME, PEER_ORG_DOMAIN)


def stack_dir(stacks_root: str, stack_name: str) -> str:
    return os.path.join(stacks_root, stack_name)


def blockchain_dir(stack_path: str) -> str:
    return os.path.join(stack_path, BLOCKCHAIN_DIR)


def genesis_block_path(stack_path: str) -> str:
    return os.path.join(blockchain_dir(stack_path), GENESIS_BLOCK_FILE)


def cryptogen_dir(stack_path: str) -> str:
    return os.path.join(blockchain_dir(stack_path), CRYPTOGEN_DIR)


def cryptogen_config_path(stack_path: str) -> str:
    return os.path.join(blockchain_dir(stack_path), CRYPTOGEN_CONFIG_FILE)


def organization_node_path(stack_path: str, org_kind: str, org_domain: str,
                           node_kind: str, node: str) -> str:
    """
    Directory cryptogen creates for one node of one organization.

    :param stack_path: The stack's working directory.
    :param org_kind: ``ordererOrganizations`` or ``peerOrganizations``.
    :param org_domain: Organization domain, e.g. ``org1.example.com``.
    :param node_kind: ``orderers`` or ``peers``.
    :param node: Node FQDN, e.g. ``peer0.org1.example.com``.
    """
    return os.path.join(cryptogen_dir(stack_path), org_kind, org_domain, node_kind, node)


def organization_msp_path(stack_path: str, org_kind: str, org_domain: str,
                          node_kind: str, node: str) -> str:
    return os.path.join(organization_node_path(stack_path, org_kind, org_domain, node_kind, node), MSP_DIR)


def organization_tls_path(stack_path: str, org_kind: str, org_domain: str,
                          node_kind: str, node: str) -> str:
    return os.path.join(organization_node_path(stack_path, org_kind, org_domain, node_kind, node), TLS_DIR)


def orderer_msp_path(stack_path: str) -> str:
    return organization_msp_path(stack_path, ORDERER_ORGANIZATIONS, ORDERER_ORG_DOMAIN, ORDERER_NODES, ORDERER_FQDN)


def orderer_tls_path(stack_path: str) -> str:
    return organization_tls_path(stack_path, ORDERER_ORGANIZATIONS, ORDERER_ORG_DOMAIN, ORDERER_NODES, ORDERER_FQDN)


def peer_msp_path(stack_path: str) -> str:
    return organization_msp_path(stack_path, PEER_ORGANIZATIONS, PEER_ORG_DOMAIN, PEER_NODES, PEER_FQDN)


def peer_tls_path(stack_path: str) -> str:
    return organization_tls_path(stack_path, PEER_ORGANIZATIONS, PEER_ORG_DOMAIN, PEER_NODES, PEER_FQDN)


def connection_profile_path(stack_path: str) -> str:
    return os.path.join(blockchain_dir(stack_path), CONNECTION_PROFILE_FILE)


def fabconnect_config_path(stack_path: str, member_id: str) -> str:
    return os.path.join(blockchain_dir(stack_path), FABCONNECT_DIR, member_id, FABCONNECT_CONFIG_FILE)


# Paths inside a cryptogen output tree. ``crypto_root`` is either
# cryptogen_dir(stack_path) or wherever that tree is mounted in a container.

def tlsca_cert_path(crypto_root: str, org_kind: str, org_domain: str) -> str:
    return posixpath.join(crypto_root, org_kind, org_domain, TLSCA_DIR, f"tlsca.{org_domain}-cert.pem")


def admin_user_path(crypto_root: str, org_domain: str) -> str:
    return posixpath.join(crypto_root, PEER_ORGANIZATIONS, org_domain, USERS_DIR, f"{ADMIN_USER}@{org_domain}")
