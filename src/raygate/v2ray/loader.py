import json
import logging
from pathlib import Path

import yaml

from raygate.v2ray.schema import SimplifiedConfig, parse_config

log = logging.getLogger(__name__)

YAML_SUFFIXES = {".yml", ".yaml"}


def load_config(path: Path) -> SimplifiedConfig:
    """
    Loads the simplified configuration from a JSON or YAML file.

    The format is chosen from the file extension; anything that is not
    `.yml`/`.yaml` is decoded as JSON.

    :param path: The simplified configuration file.
    :return: The parsed configuration.
    """
    if not path.exists():
        raise FileNotFoundError(f"config file does not exist: {path}")

    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() in YAML_SUFFIXES:
            try:
                raw = yaml.safe_load(handle) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"invalid YAML in {path}: {e}") from e
        else:
            raw = json.load(handle)

    log.debug(f"Loaded simplified configuration from '{path}'.")
    return parse_config(raw)
