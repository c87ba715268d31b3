"""
Unit tests for the compose and cryptogen converters.
"""
import yaml

from fabtopo.BUILDERS.connectors import FabconnectConnectorFactory
from fabtopo.BUILDERS.topology_builder import build_topology
from fabtopo.CONVERTERS.to_compose import ComposeConverter
from fabtopo.CONVERTERS.to_cryptogen import CryptogenConfigConverter
from fabtopo.CONVERTERS.to_fabconnect import FabconnectConfigConverter
from fabtopo.MODELS.stack import Stack
from fabtopo.UTILS import layout


def test_compose_document(tmp_path):
    definitions = build_topology(Stack(name="dev", members=["a"]), "/stacks")
    out = tmp_path / "compose" / "docker-compose.yml"
    ComposeConverter(definitions).convert(str(out))

    with open(out) as f:
        document = yaml.safe_load(f)

    assert list(document['services']) == ["ca_org1", "orderer.example.com", "peer0.org1.example.com", "fabconnect_a"]
    assert document['services']['fabconnect_a'] == {}
    assert set(document['volumes']) == {"orderer.example.com", "peer0.org1.example.com"}

    orderer = document['services']['orderer.example.com']
    assert orderer['image'] == "hyperledger/fabric-orderer:latest"
    assert orderer['command'] == "orderer"
    assert "orderer.example.com:/var/hyperledger/production/orderer" in orderer['volumes']
    assert "/stacks/dev/blockchain/genesis_block.pb:/var/hyperledger/orderer/orderer.genesis.block:ro" in orderer['volumes']


def test_compose_fields_preserved():
    definitions = build_topology(Stack(name="dev", members=["a"]), "/stacks", FabconnectConnectorFactory())
    services = ComposeConverter(definitions).to_dict()['services']
    for d in definitions:
        rendered = services[d.service_name]
        assert rendered['image'] == d.service.image
        assert rendered.get('environment', {}) == d.service.environment
        assert rendered.get('ports', []) == d.service.ports
        assert rendered.get('volumes', []) == [m.to_compose() for m in d.service.volumes]
        assert rendered.get('depends_on', []) == d.service.depends_on


def test_cryptogen_template_matches_layout(tmp_path):
    path = CryptogenConfigConverter().convert(str(tmp_path / "blockchain" / "cryptogen.yaml"))
    with open(path) as f:
        config = yaml.safe_load(f)

    orderer_org = config['OrdererOrgs'][0]
    peer_org = config['PeerOrgs'][0]
    assert layout.node_fqdn(orderer_org['Specs'][0]['Hostname'], orderer_org['Domain']) == layout.ORDERER_FQDN
    assert layout.node_fqdn(peer_org['Specs'][0]['Hostname'], peer_org['Domain']) == layout.PEER_FQDN
    assert peer_org['Users']['Count'] == 1


def test_fabconnect_files_match_connector_mounts(tmp_path):
    stack = Stack(name="dev", members=["a", "b"])
    stack_path = layout.stack_dir(str(tmp_path), "dev")
    written = FabconnectConfigConverter(stack).convert(stack_path)

    connectors = build_topology(stack, str(tmp_path), FabconnectConnectorFactory())[3:]
    for connector in connectors:
        for mount in connector.bind_mounts:
            assert mount.source in written or mount.source == layout.cryptogen_dir(stack_path)

    with open(layout.fabconnect_config_path(stack_path, "a")) as f:
        config = yaml.safe_load(f)
    assert config['rpc']['configPath'] == "/fabconnect/ccp.yaml"
    assert config['receipts']['leveldb']['path'] == "/fabconnect/receipts"
    assert config['http']['port'] == 3000


def test_connection_profile_points_at_topology():
    profile = FabconnectConfigConverter(Stack(name="dev")).connection_profile()
    assert profile['peers']['fabric_peer']['url'] == "grpcs://peer0.org1.example.com:7051"
    assert profile['orderers']['fabric_orderer']['url'] == "grpcs://orderer.example.com:7050"
    assert profile['certificateAuthorities']['org1.example.com']['url'] == "https://ca_org1:7054"
    assert profile['organizations']['org1.example.com']['mspid'] == "Org1MSP"
    assert list(profile['channels']) == ["firefly"]
    assert profile['peers']['fabric_peer']['tlsCACerts']['path'] == (
        "/etc/firefly/organizations/peerOrganizations/org1.example.com/tlsca/tlsca.org1.example.com-cert.pem"
    )
