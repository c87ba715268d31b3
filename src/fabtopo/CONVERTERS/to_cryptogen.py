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
Converter rendering the cryptogen template for a stack.

Organization and host names come from the layout module so that the tree
cryptogen generates is the one the topology builder binds.
"""
import logging
import os

from jinja2 import Template

from ..UTILS import layout

logger = logging.getLogger(__name__)

CRYPTOGEN_TEMPLATE = """OrdererOrgs:
  - Name: {{ orderer_org_name }}
    Domain: {{ orderer_domain }}
    EnableNodeOUs: true
    Specs:
      - Hostname: {{ orderer_hostname }}
PeerOrgs:
  - Name: {{ peer_org_name }}
    Domain: {{ peer_domain }}
    EnableNodeOUs: true
    Specs:
      - Hostname: {{ peer_hostname }}
    Users:
      Count: {{ user_count }}
"""


class CryptogenConfigConverter:
    """
    Produces the template consumed by cryptogen generate --config.
    """

    def __init__(self, user_count: int = 1):
        """
        :param user_count: Non-admin users to generate for the peer organization.
        """
        self.user_count = user_count
        self.template = Template(CRYPTOGEN_TEMPLATE)

    def render(self) -> str:
        return self.template.render(
            orderer_org_name=layout.ORDERER_ORG_NAME,
            orderer_domain=layout.ORDERER_ORG_DOMAIN,
            orderer_hostname=layout.ORDERER_HOSTNAME,
            peer_org_name=layout.PEER_ORG_NAME,
            peer_domain=layout.PEER_ORG_DOMAIN,
            peer_hostname=layout.PEER_HOSTNAME,
            user_count=self.user_count,
        )

    def convert(self, output_path: str) -> str:
        """
        Writes the template.

        :param output_path: Destination file, normally layout.cryptogen_config_path.
        :return: The path written.
        """
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, 'w') as f:
            f.write(self.render())
        logger.info("cryptogen template written to %s", output_path)
        return output_path
