from __future__ import annotations

from typing import Any, Dict

import yaml

from .loader import PathLike, read_config_text
from .parser import Configuration, parse_config_text
from .validate import validate_configuration


def load_multicheck_config(path: PathLike) -> Configuration:
    """
    Load the multicheck config file.

    pipeline:
        1.) Read the file text
        2.) Parse command/item lines
        3.) Validate item patterns
    """
    text = read_config_text(path, description="Multicheck config")
    cfg = parse_config_text(text, source=str(path))
    validate_configuration(cfg)
    return cfg


def configuration_to_dict(cfg: Configuration) -> Dict[str, Any]:
    return {
        "source": cfg.source,
        "commands": [
            {
                "command": spec.command_line,
                "items": [{"pattern": rule.pattern, "item": rule.item_prefix} for rule in spec.rules],
            }
            for spec in cfg.commands
        ],
    }


def dump_configuration(cfg: Configuration) -> str:
    return yaml.safe_dump(configuration_to_dict(cfg), sort_keys=False)
