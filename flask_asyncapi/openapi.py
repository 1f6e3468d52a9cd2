"""Minimal deterministic OpenAPI builder for the REST side of a Flask app.

Scope (purposefully narrow):
- every url_map rule except static files, channel routes and document routes
- path parameters typed from their converters
- summary from the first docstring line of the view
- operationIds ``auto_<method>_<path>`` and one tag per first path segment
"""
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from flask import Flask

from .extension import CHANNEL_ATTR, DOCUMENT_ATTR

OPENAPI_VERSION = "3.0.3"

_RULE_PARAM = re.compile(r"<(?:([a-zA-Z_][a-zA-Z0-9_]*)(?:\([^)]*\))?:)?([a-zA-Z_][a-zA-Z0-9_]*)>")

_CONVERTER_TYPES = {
    "int": {"type": "integer"},
    "float": {"type": "number"},
    "uuid": {"type": "string", "format": "uuid"},
}

_IGNORED_METHODS = {"HEAD", "OPTIONS"}


def _openapi_path(rule: str) -> Tuple[str, List[Dict[str, Any]]]:
    """Rewrite ``/items/<int:item_id>`` as ``/items/{item_id}`` plus its parameters."""
    params = [
        {
            "name": name,
            "in": "path",
            "required": True,
            "schema": dict(_CONVERTER_TYPES.get(converter or "", {"type": "string"})),
        }
        for converter, name in _RULE_PARAM.findall(rule)
    ]
    return _RULE_PARAM.sub(lambda m: f"{{{m.group(2)}}}", rule), params


def _summary(view) -> Optional[str]:
    doc = (view.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else None


def _is_excluded(view, endpoint: str, exclude: Iterable[str]) -> bool:
    return (
        endpoint == "static"
        or endpoint.endswith(".static")
        or endpoint in exclude
        or hasattr(view, CHANNEL_ATTR)
        or hasattr(view, DOCUMENT_ATTR)
    )


def build_openapi_spec(
    app: Flask,
    info: Optional[Dict[str, Any]] = None,
    servers: Optional[Union[list, Dict[str, Any]]] = None,
    exclude: Iterable[str] = (),
) -> Dict[str, Any]:
    exclude = set(exclude)
    paths: Dict[str, Any] = {}

    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        view = app.view_functions.get(rule.endpoint)
        if view is None or _is_excluded(view, rule.endpoint, exclude):
            continue
        path, params = _openapi_path(rule.rule)
        ops = paths.setdefault(path, {})
        for method in sorted(rule.methods - _IGNORED_METHODS):
            op: Dict[str, Any] = {"responses": {"200": {"description": "OK"}}}
            summary = _summary(view)
            if summary:
                op["summary"] = summary
            if params:
                op["parameters"] = params
            ops[method.lower()] = op

    # Add operationIds & tags
    tag_desc: Dict[str, str] = {}
    for path, ops in paths.items():
        segment = path.split("/")[1] if path.count("/") else ""
        tag = segment.capitalize() if segment and not segment.startswith("{") else "Root"
        for method, od in ops.items():
            rid = path.strip("/").replace("/", "_").replace("{", "").replace("}", "") or "root"
            od["operationId"] = f"auto_{method}_{rid}"
            od["tags"] = [tag]
        tag_desc[tag] = f"{tag} endpoints"

    spec: Dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": dict(info) if info else {"title": app.name, "version": "0.1.0"},
        "paths": paths,
        "tags": [{"name": n, "description": d} for n, d in sorted(tag_desc.items())],
    }
    if servers:
        spec["servers"] = list(servers.values()) if isinstance(servers, dict) else list(servers)
    return spec


__all__ = ["OPENAPI_VERSION", "build_openapi_spec"]
