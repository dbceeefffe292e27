"""
YAML/JSON schema description format.

A schema description maps entity kind names to field declarations. The
document may hold the mapping directly or wrap it in an ``entities`` key.

Example schema:
    entities:
      table:
        schema: required
        comment: string?
      column:
        type: string
        primaryKey: boolean?
        default:
          value: string
          expression: boolean
      index:
        columns:
          - expression: string
            isExpression: boolean
        using: [btree, hash, gin]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..errors import SchemaDefinitionError

YAML_SUFFIXES = {".yaml", ".yml"}


def parse_definition(data: Any) -> Dict[str, Dict[str, Any]]:
    """Extract the kind-to-fields mapping from a parsed document."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaDefinitionError(
            f"Schema document must be a mapping, got {type(data).__name__}"
        )
    if set(data) == {"entities"} and isinstance(data["entities"], dict):
        data = data["entities"]
    return data


def parse_yaml(yaml_str: str) -> Dict[str, Dict[str, Any]]:
    """Parse schema description from YAML string."""
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise SchemaDefinitionError(f"Invalid YAML schema: {e}") from e
    return parse_definition(data)


def parse_json(json_str: str) -> Dict[str, Dict[str, Any]]:
    """Parse schema description from JSON string."""
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SchemaDefinitionError(f"Invalid JSON schema: {e}") from e
    return parse_definition(data)


def load_definition(path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """Load a schema description from a .yaml/.yml or .json file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        return parse_yaml(text)
    return parse_json(text)


def dump_yaml(definition: Dict[str, Dict[str, Any]]) -> str:
    """Render a schema description as YAML."""
    return yaml.dump({"entities": definition}, default_flow_style=False, sort_keys=False)
