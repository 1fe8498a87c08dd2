"""
YAML rendering of the manifest with PyYAML.
Multi-line values (PEM blocks) are emitted in literal style so the document
stays readable and round-trips exactly.
"""
from typing import Dict, Mapping

import yaml

from cfmanifest.common.errors import SerializationError


class ManifestDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper, data):
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


ManifestDumper.add_representer(str, _str_representer)


def dump_manifest(manifest: Mapping[str, str]) -> str:
    try:
        return yaml.dump(dict(manifest), Dumper=ManifestDumper,
                         default_flow_style=False, sort_keys=True, allow_unicode=True)
    except yaml.YAMLError as e:
        raise SerializationError(f"marshaling output as yaml: {e}") from e


def load_manifest(text: str) -> Dict[str, str]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SerializationError(f"parsing manifest yaml: {e}") from e
    if not isinstance(data, dict):
        raise SerializationError(f"manifest must be a mapping, got {type(data).__name__}")
    return data
