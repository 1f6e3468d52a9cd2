"""Text forms of a generated document.

``to_yaml`` keeps document order, drops ``None`` entries and double-quotes
every string (keys included), so aliases such as ``@type`` or ``on`` load
back unchanged.
"""
import json
from typing import Any

import yaml


def to_json(document: Any, pretty: bool = True) -> str:
    if pretty:
        return json.dumps(document, indent=2)
    return json.dumps(document, separators=(",", ":"))


class _QuotedDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, value: str):
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style='"')


_QuotedDumper.add_representer(str, _represent_str)


def _prune(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _prune(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, (list, tuple)):
        return [_prune(v) for v in obj if v is not None]
    return obj


def to_yaml(document: Any) -> str:
    return yaml.dump(
        _prune(document),
        Dumper=_QuotedDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


__all__ = ["to_json", "to_yaml"]
