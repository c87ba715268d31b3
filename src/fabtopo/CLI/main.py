"""
Command Line Interface for fabtopo.
"""
import logging
import os

import click
import yaml
from pydantic import ValidationError

from ..BUILDERS.connectors import FabconnectConnectorFactory, bare_connector
from ..BUILDERS.topology_builder import build_topology
from ..config import load_settings
from ..CONVERTERS.to_compose import ComposeConverter
from ..CONVERTERS.to_cryptogen import CryptogenConfigConverter
from ..CONVERTERS.to_fabconnect import FabconnectConfigConverter
from ..exceptions import ProvisioningFailure
from ..MODELS.stack import Stack
from ..PROVISIONERS.crypto_material import CryptoMaterialProvisioner
from ..PROVISIONERS.genesis_block import GenesisBlockProvisioner
from ..RUNNERS.container_runner import DockerRunner
from ..UTILS import layout
from ..UTILS.topology_checks import check_topology

logger = logging.getLogger(__name__)

CONNECTORS = {
    'bare': bare_connector,
    'fabconnect': FabconnectConnectorFactory(),
}


def _load_stack(name, members, stack_file):
    """
    Builds the stack from a stack file or from the command line, not both.
    """
    if stack_file and (name or members):
        raise click.UsageError("STACK_NAME and --member cannot be combined with --stack-file")
    if not stack_file and not name:
        raise click.UsageError("STACK_NAME or --stack-file is required")
    try:
        if stack_file:
            return Stack.from_file(stack_file)
        return Stack(name=name, members=list(members))
    except yaml.YAMLError as e:
        raise click.BadParameter(f"{stack_file} is not valid YAML: {e}", param_hint="--stack-file")
    except ValidationError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option('--env-file', default='.env', help='dotenv file with FABTOPO_* settings')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging and tool output')
@click.pass_context
def cli(ctx, env_file, verbose):
    """
    fabtopo - Fabric network topology generator.

    Generates compose service definitions and credential material for a
    single-organization Fabric test network.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['settings'] = load_settings(env_file)
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('stack_name', required=False)
@click.option('--member', '-m', multiple=True, help='Member id, repeatable, in join order')
@click.option('--stack-file', '-s', type=click.Path(exists=True, dir_okay=False), help='YAML stack description')
@click.option('--connectors', '-c', type=click.Choice(sorted(CONNECTORS)), default='bare')
@click.option('--out', '-o', default=None, help='Compose file to write, stdout if omitted')
@click.pass_context
def topology(ctx, stack_name, member, stack_file, connectors, out):
    """Generate the compose services for a stack."""
    settings = ctx.obj['settings']
    stack = _load_stack(stack_name, member, stack_file)

    definitions = build_topology(stack, settings.stacks_dir, CONNECTORS[connectors])
    for problem in check_topology(definitions):
        logger.warning(problem)

    converter = ComposeConverter(definitions)
    if out:
        converter.convert(out)
        click.echo(f"Wrote {len(definitions)} services to {out}")
    else:
        click.echo(converter.to_yaml(), nl=False)


@cli.command()
@click.argument('stack_name', required=False)
@click.option('--member', '-m', multiple=True, help='Member id, repeatable, in join order')
@click.option('--stack-file', '-s', type=click.Path(exists=True, dir_okay=False), help='YAML stack description')
@click.pass_context
def provision(ctx, stack_name, member, stack_file):
    """Generate crypto material, the genesis block and connector configuration for a stack."""
    settings = ctx.obj['settings']
    verbose = ctx.obj['verbose']
    stack = _load_stack(stack_name, member, stack_file)

    stack_path = layout.stack_dir(settings.stacks_dir, stack.name)
    output_dir = layout.cryptogen_dir(stack_path)
    os.makedirs(output_dir, exist_ok=True)
    config_path = CryptogenConfigConverter().convert(layout.cryptogen_config_path(stack_path))

    runner = ctx.obj.get('runner') or DockerRunner(settings.docker_binary)
    # Both tools write under the same blockchain directory: run them one after the other
    try:
        CryptoMaterialProvisioner(runner, settings.tools_image).generate(config_path, output_dir, verbose=verbose)
        GenesisBlockProvisioner(runner, settings.tools_image).generate(layout.blockchain_dir(stack_path), verbose=verbose)
    except ProvisioningFailure as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    FabconnectConfigConverter(stack).convert(stack_path)

    click.echo(f"Provisioned {stack.name} in {layout.blockchain_dir(stack_path)}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
