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
Converter writing the files a fabconnect connector reads at startup: one
fabconnect.yaml per member and the connection profile they share.

Addresses, MSP ids and certificate paths are taken from the layout module
and the topology builder, so the profile points at the services and the
cryptogen tree the topology actually contains.
"""
import logging
import os
from typing import Any, Dict, List

import yaml
from jinja2 import Template

from ..BUILDERS.connectors import (
    CRYPTO_MOUNT, FABCONNECT_EVENTS, FABCONNECT_PORT, FABCONNECT_PROFILE, FABCONNECT_RECEIPTS,
)
from ..BUILDERS.topology_builder import CA_PORT, ORDERER_PORT, PEER_PORT
from ..MODELS.stack import Stack
from ..PROVISIONERS.genesis_block import CHANNEL_ID
from ..UTILS import layout

logger = logging.getLogger(__name__)

FABCONNECT_TEMPLATE = """maxinflight: 10
maxtxwaittime: 60
sendconcurrency: 25
receipts:
  maxdocs: 1000
  queryLimit: 100
  retryInitialDelay: 5
  retryTimeout: 30
  leveldb:
    path: {{ receipts_path }}
events:
  webhooksAllowPrivateIPs: true
  leveldb:
    path: {{ events_path }}
http:
  port: {{ http_port }}
rpc:
  useGatewayClient: true
  configPath: {{ profile_path }}
"""

PEER_KEY = "fabric_peer"
ORDERER_KEY = "fabric_orderer"


class FabconnectConfigConverter:
    """
    Renders fabconnect configuration for every member of a stack.
    """

    def __init__(self, stack: Stack):
        """
        :param stack: The stack whose members each get a connector.
        """
        self.stack = stack
        self.template = Template(FABCONNECT_TEMPLATE)

    def render_config(self) -> str:
        return self.template.render(
            receipts_path=FABCONNECT_RECEIPTS,
            events_path=FABCONNECT_EVENTS,
            http_port=FABCONNECT_PORT,
            profile_path=FABCONNECT_PROFILE,
        )

    def connection_profile(self) -> Dict[str, Any]:
        """
        Builds the Fabric SDK connection profile used by every connector.

        :return: The profile as a mapping, paths relative to the container.
        """
        org = layout.PEER_ORG_DOMAIN
        admin = layout.admin_user_path(CRYPTO_MOUNT, org)
        return {
            'version': '1.1.0',
            'client': {
                'organization': org,
                'logging': {'level': 'info'},
                'cryptoconfig': {'path': CRYPTO_MOUNT},
                'credentialStore': {
                    'path': f"{admin}/msp",
                    'cryptoStore': {'path': f"{admin}/msp"},
                },
                'tlsCerts': {
                    'client': {
                        'cert': {'path': f"{admin}/tls/client.crt"},
                        'key': {'path': f"{admin}/tls/client.key"},
                    },
                },
            },
            'channels': {
                CHANNEL_ID: {
                    'orderers': [ORDERER_KEY],
                    'peers': {
                        PEER_KEY: {
                            'chaincodeQuery': True,
                            'endorsingPeer': True,
                            'eventSource': True,
                            'ledgerQuery': True,
                        },
                    },
                },
            },
            'organizations': {
                org: {
                    'mspid': layout.PEER_MSP_ID,
                    'cryptoPath': f"{admin}/msp",
                    'certificateAuthorities': [org],
                    'peers': [PEER_KEY],
                },
            },
            'certificateAuthorities': {
                org: {
                    'url': f"https://{layout.CA_SERVICE_NAME}:{CA_PORT}",
                    'tlsCACerts': {'path': layout.tlsca_cert_path(CRYPTO_MOUNT, layout.PEER_ORGANIZATIONS, org)},
                    'registrar': {'enrollId': 'admin', 'enrollSecret': 'adminpw'},
                },
            },
            'orderers': {
                ORDERER_KEY: {
                    'url': f"grpcs://{layout.ORDERER_FQDN}:{ORDERER_PORT}",
                    'tlsCACerts': {'path': layout.tlsca_cert_path(
                        CRYPTO_MOUNT, layout.ORDERER_ORGANIZATIONS, layout.ORDERER_ORG_DOMAIN)},
                },
            },
            'peers': {
                PEER_KEY: {
                    'url': f"grpcs://{layout.PEER_FQDN}:{PEER_PORT}",
                    'tlsCACerts': {'path': layout.tlsca_cert_path(CRYPTO_MOUNT, layout.PEER_ORGANIZATIONS, org)},
                },
            },
        }

    def convert(self, stack_path: str) -> List[str]:
        """
        Writes the connection profile and each member's fabconnect.yaml.

        :param stack_path: The stack's working directory.
        :return: Paths written, connection profile first.
        """
        written = []
        profile_path = layout.connection_profile_path(stack_path)
        os.makedirs(os.path.dirname(profile_path), exist_ok=True)
        with open(profile_path, 'w') as f:
            yaml.safe_dump(self.connection_profile(), f, sort_keys=False, default_flow_style=False)
        written.append(profile_path)

        content = self.render_config()
        for member in self.stack.members:
            path = layout.fabconnect_config_path(stack_path, member.id)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w') as f:
                f.write(content)
            written.append(path)

        logger.info("fabconnect configuration written for %d members", len(self.stack.members))
        return written
