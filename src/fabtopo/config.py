"""
Settings for fabtopo, read from the environment and an optional .env file.
"""
import os
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel

ENV_PREFIX = "FABTOPO_"

DEFAULT_STACKS_DIR = os.path.join(os.path.expanduser("~"), ".firefly", "stacks")
DEFAULT_DOCKER_BINARY = "docker"
DEFAULT_TOOLS_IMAGE = "hyperledger/fabric-tools"


class Settings(BaseModel):
    """
    Runtime settings.

    :param stacks_dir: Root directory holding one working directory per stack.
    :param docker_binary: Container runtime executable used by the provisioners.
    :param tools_image: Image providing cryptogen and configtxgen.
    """
    stacks_dir: str = DEFAULT_STACKS_DIR
    docker_binary: str = DEFAULT_DOCKER_BINARY
    tools_image: str = DEFAULT_TOOLS_IMAGE


def load_settings(env_file: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds settings from FABTOPO_* variables.

    Values in the process environment override values from the .env file.

    :param env_file: Optional path to a dotenv file.
    :param environ: Environment to read, defaults to os.environ.
    :return: The resolved settings.
    """
    merged: Dict[str, str] = {}
    if env_file and os.path.exists(env_file):
        merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    merged.update(os.environ if environ is None else environ)

    values = {}
    for field_name in Settings.model_fields:
        key = ENV_PREFIX + field_name.upper()
        if merged.get(key):
            values[field_name] = merged[key]

    if "stacks_dir" in values:
        values["stacks_dir"] = os.path.abspath(os.path.expanduser(values["stacks_dir"]))
    return Settings(**values)
