import os

from fabtopo.UTILS import layout


def test_stack_paths():
    stack = layout.stack_dir("/root/stacks", "dev")
    assert stack == "/root/stacks/dev"
    assert layout.genesis_block_path(stack) == "/root/stacks/dev/blockchain/genesis_block.pb"
    assert layout.cryptogen_dir(stack) == "/root/stacks/dev/blockchain/cryptogen"
    assert layout.cryptogen_config_path(stack) == "/root/stacks/dev/blockchain/cryptogen.yaml"


def test_node_paths():
    stack = "/s/dev"
    assert layout.orderer_msp_path(stack) == (
        "/s/dev/blockchain/cryptogen/ordererOrganizations/example.com/orderers/orderer.example.com/msp"
    )
    assert layout.peer_tls_path(stack) == (
        "/s/dev/blockchain/cryptogen/peerOrganizations/org1.example.com/peers/peer0.org1.example.com/tls"
    )


def test_generic_node_path_matches_shortcuts():
    stack = "/s/dev"
    assert layout.organization_msp_path(
        stack, layout.PEER_ORGANIZATIONS, layout.PEER_ORG_DOMAIN, layout.PEER_NODES, layout.PEER_FQDN
    ) == layout.peer_msp_path(stack)
    assert os.path.dirname(layout.orderer_tls_path(stack)) == os.path.dirname(layout.orderer_msp_path(stack))
