"""
Unit tests for the crypto material and genesis block provisioners.
"""
import pytest

from fabtopo.exceptions import ProvisioningFailure
from fabtopo.PROVISIONERS.crypto_material import CryptoMaterialProvisioner, generate_crypto_material
from fabtopo.PROVISIONERS.genesis_block import GenesisBlockProvisioner, generate_genesis_block
from fabtopo.RUNNERS.recording_runner import RecordingRunner


def test_crypto_material_argv():
    runner = RecordingRunner()
    CryptoMaterialProvisioner(runner).generate("/s/dev/blockchain/cryptogen.yaml", "/s/dev/blockchain/cryptogen")

    assert len(runner.calls) == 1
    call = runner.last_call
    assert call.working_dir == "/s/dev/blockchain"
    assert call.argv == (
        "run", "--rm",
        "-v", "/s/dev/blockchain/cryptogen.yaml:/etc/template.yml:ro",
        "-v", "/s/dev/blockchain/cryptogen:/output",
        "hyperledger/fabric-tools",
        "cryptogen", "generate", "--config", "/etc/template.yml", "--output", "/output",
    )


def test_crypto_material_repeatable():
    runner = RecordingRunner()
    generate_crypto_material("/cfg/template.yml", "/out", runner=runner)
    generate_crypto_material("/cfg/template.yml", "/out", runner=runner)
    assert runner.calls[0] == runner.calls[1]


def test_genesis_block_argv():
    runner = RecordingRunner()
    generate_genesis_block("/s/dev/blockchain", runner=runner, verbose=True)

    call = runner.last_call
    assert call.working_dir == "/s/dev/blockchain"
    assert call.verbose is True
    assert call.capture_output is False
    assert call.argv == (
        "run", "--rm",
        "-v", "/s/dev/blockchain:/genesis",
        "hyperledger/fabric-tools",
        "configtxgen", "-outputBlock", "/genesis/genesis_block.pb",
        "-profile", "SampleDevModeSolo", "-channelID", "firefly",
    )


def test_custom_image():
    runner = RecordingRunner()
    GenesisBlockProvisioner(runner, image="tools:2.5").generate("/out")
    assert "tools:2.5" in runner.last_call.argv


@pytest.mark.parametrize("provision", [
    lambda r: CryptoMaterialProvisioner(r).generate("/cfg/t.yml", "/out"),
    lambda r: GenesisBlockProvisioner(r).generate("/out"),
])
def test_non_zero_exit_fails(provision):
    runner = RecordingRunner(exit_code=2)
    with pytest.raises(ProvisioningFailure) as exc:
        provision(runner)
    assert exc.value.exit_code == 2
    # single attempt, no retries
    assert len(runner.calls) == 1


@pytest.mark.parametrize("tool, provision", [
    ("cryptogen", lambda r: CryptoMaterialProvisioner(r).generate("/cfg/t.yml", "/out")),
    ("configtxgen", lambda r: GenesisBlockProvisioner(r).generate("/out")),
])
def test_launch_error_fails(tool, provision):
    runner = RecordingRunner(error=FileNotFoundError("docker"))
    with pytest.raises(ProvisioningFailure) as exc:
        provision(runner)
    assert exc.value.exit_code is None
    assert exc.value.tool == tool
    assert len(runner.calls) == 1
    assert isinstance(exc.value.__cause__, FileNotFoundError)


def test_output_directory_not_created(tmp_path):
    out = tmp_path / "cryptogen"
    CryptoMaterialProvisioner(RecordingRunner()).generate(str(tmp_path / "t.yml"), str(out))
    assert not out.exists()
