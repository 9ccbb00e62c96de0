"""Config module."""
from pathlib import Path

from attr import frozen
from oes.skating.models.config import Config
from oes.skating.serialization import get_config_converter
from ruamel.yaml import YAML

yaml = YAML(typ="safe")


@frozen
class CommandLineConfig:
    """Command line config settings."""

    port: int
    bind: str
    root_path: str
    debug: bool
    reload: bool
    config: Path


def load_config(path: Path) -> Config:
    """Load the main configuration."""
    doc = yaml.load(path)
    config = get_config_converter().structure(doc, Config)
    return config
