"""Cluster definition loading and command line value parsing."""

import json
import re
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .model.instancegroup import InstanceGroup
from .utils.logger import get_logger

logger = get_logger(__name__)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """Parse a Go-style duration such as ``90s``, ``5m`` or ``1h30m`` into seconds.

    A bare number is read as seconds.
    """
    text = str(value).strip()
    if not text:
        raise ConfigError("empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ConfigError(f"negative duration: {value!r}")
        return seconds

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if pos != len(text) or pos == 0:
        raise ConfigError(f"invalid duration: {value!r}")
    return total


class ClusterConfig(BaseModel):
    """Declared cluster: its name, region and instance groups."""

    model_config = ConfigDict(populate_by_name=True)

    cluster: str
    region: Optional[str] = None
    instance_groups: List[InstanceGroup] = Field(default_factory=list, alias="instanceGroups")

    @field_validator("instance_groups")
    @classmethod
    def _unique_names(cls, groups: List[InstanceGroup]) -> List[InstanceGroup]:
        seen = set()
        for group in groups:
            if group.name in seen:
                raise ValueError(f"duplicate instance group name {group.name!r}")
            seen.add(group.name)
        return groups


def load_cluster_config(config_path: Path) -> ClusterConfig:
    """Load a cluster definition from a YAML or JSON file."""
    config_path = Path(config_path)
    try:
        with open(config_path, "r") as f:
            if config_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read cluster definition {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"cluster definition {config_path} must be a mapping")

    try:
        config = ClusterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid cluster definition {config_path}: {e}") from e

    logger.info(
        f"Loaded cluster {config.cluster} with {len(config.instance_groups)} instance groups "
        f"from {config_path}"
    )
    return config
