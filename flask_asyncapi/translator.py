"""Translate pydantic models and typing annotations into AsyncAPI schema objects.

Best effort by contract: every input yields a schema. Constructs outside the
supported set (``Any``, arbitrary classes, self-referencing models, forward
references) fall back to ``{"type": "object"}`` and are reported on the
returned :class:`Translation` so callers can choose to be strict.

Supported kinds, one translation function each:

    STRING/NUMBER/INTEGER/BOOLEAN  str, float/Decimal, int, bool
    ARRAY     list[X], set[X], tuple[X, ...], Sequence[X]
    OBJECT    pydantic BaseModel subclasses
    ENUM      enum.Enum subclasses
    LITERAL   Literal[...]
    UNION     Union[A, B] / A | B (discriminated unions included)
    NULLABLE  Optional[X] / X | None
    OPTIONAL  model field that may be omitted (default None)
    DEFAULT   model field with a non-None default or default_factory
    FIELD     required model field, Annotated[X, Field(...)]
    RECORD    dict[str, V], Mapping[str, V]
    RAW       dict that already is a schema object
"""
import collections.abc
import copy
import inspect
import types
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined, to_jsonable_python

from .exceptions import UnsupportedSchemaError

_NoneType = type(None)

FALLBACK_SCHEMA: Dict[str, Any] = {"type": "object"}


class SchemaKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    LITERAL = "literal"
    UNION = "union"
    NULLABLE = "nullable"
    OPTIONAL = "optional"
    DEFAULT = "default"
    FIELD = "field"
    RECORD = "record"
    RAW = "raw"
    UNSUPPORTED = "unsupported"


_PRIMITIVES = {
    str: SchemaKind.STRING,
    bool: SchemaKind.BOOLEAN,
    int: SchemaKind.INTEGER,
    float: SchemaKind.NUMBER,
    Decimal: SchemaKind.NUMBER,
}

_ARRAY_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
)

_RECORD_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

# JavaScript typeof names, as used by JSON schema consumers for literals
_LITERAL_TYPES = ((bool, "boolean"), (int, "number"), (float, "number"), (str, "string"))


@dataclass
class Translation:
    schema: Dict[str, Any]
    unsupported: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.unsupported


class _Context:
    def __init__(self):
        self.unsupported: List[str] = []
        self.models: List[type] = []


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def _has_default(info: FieldInfo) -> bool:
    if info.default_factory is not None:
        return True
    return info.default is not PydanticUndefined and info.default is not None


def classify(schema: Any) -> SchemaKind:
    """Return the kind of ``schema``; unknown inputs map to UNSUPPORTED."""
    if isinstance(schema, FieldInfo):
        if _has_default(schema):
            return SchemaKind.DEFAULT
        if not schema.is_required():
            return SchemaKind.OPTIONAL
        return SchemaKind.FIELD
    if isinstance(schema, dict):
        return SchemaKind.RAW
    origin = get_origin(schema)
    if origin is None:
        if not isinstance(schema, type):
            return SchemaKind.UNSUPPORTED
        if issubclass(schema, Enum):
            return SchemaKind.ENUM
        if issubclass(schema, BaseModel):
            return SchemaKind.OBJECT
        if schema in _PRIMITIVES:
            return _PRIMITIVES[schema]
        if schema in _ARRAY_ORIGINS:
            return SchemaKind.ARRAY
        if schema in _RECORD_ORIGINS:
            return SchemaKind.RECORD
        return SchemaKind.UNSUPPORTED
    if origin is Annotated:
        return SchemaKind.FIELD
    if origin is Literal:
        return SchemaKind.LITERAL
    if _is_union(origin):
        return SchemaKind.NULLABLE if _NoneType in get_args(schema) else SchemaKind.UNION
    if origin in _ARRAY_ORIGINS:
        return SchemaKind.ARRAY
    if origin in _RECORD_ORIGINS:
        return SchemaKind.RECORD
    return SchemaKind.UNSUPPORTED


def _with_description(node: Dict[str, Any], description: Optional[str]) -> Dict[str, Any]:
    if description:
        node["description"] = description
    return node


def _primitive(kind: SchemaKind) -> Callable[[Any, _Context, str], Dict[str, Any]]:
    def translate_primitive(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
        return {"type": kind.value}
    return translate_primitive


def _translate_array(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    args = get_args(schema)
    item = args[0] if args else Any
    return {"type": "array", "items": _translate(item, ctx, f"{path}.items")}


def _translate_object(schema: type, ctx: _Context, path: str) -> Dict[str, Any]:
    if schema in ctx.models:
        return _fallback(schema, ctx, path)
    ctx.models.append(schema)
    try:
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, info in schema.model_fields.items():
            key = info.alias or name
            properties[key] = _translate(info, ctx, f"{path}.properties.{key}")
            if info.is_required():
                required.append(key)
    finally:
        ctx.models.pop()
    node: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        node["required"] = required
    doc = schema.__dict__.get("__doc__")
    return _with_description(node, inspect.cleandoc(doc) if doc else None)


def _translate_enum(schema: type, ctx: _Context, path: str) -> Dict[str, Any]:
    return {"type": "string", "enum": [to_jsonable_python(member.value, fallback=repr) for member in schema]}


def _translate_literal(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    values = [to_jsonable_python(v, fallback=repr) for v in get_args(schema)]
    first = values[0] if values else None
    type_name = "object"
    for py_type, js_name in _LITERAL_TYPES:
        if isinstance(first, py_type):
            type_name = js_name
            break
    return {"type": type_name, "enum": values}


def _translate_union(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    return {
        "oneOf": [
            _translate(option, ctx, f"{path}.oneOf.{i}")
            for i, option in enumerate(get_args(schema))
        ]
    }


def _translate_nullable(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    rest = tuple(arg for arg in get_args(schema) if arg is not _NoneType)
    inner = rest[0] if len(rest) == 1 else Union[rest]
    return {**_translate(inner, ctx, path), "nullable": True}


def _field_parts(schema: Any) -> Tuple[Any, Optional[str]]:
    """Split a FieldInfo or Annotated[...] into (inner annotation, description)."""
    if isinstance(schema, FieldInfo):
        return schema.annotation, schema.description
    inner, *metadata = get_args(schema)
    description = None
    for item in metadata:
        if isinstance(item, FieldInfo) and item.description:
            description = item.description
    return inner, description


def _fell_back(ctx: _Context, path: str, mark: int) -> bool:
    return path in ctx.unsupported[mark:]


def _translate_field(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    inner, description = _field_parts(schema)
    mark = len(ctx.unsupported)
    node = _translate(inner, ctx, path)
    # fallback nodes stay bare
    if _fell_back(ctx, path, mark):
        return node
    return _with_description(node, description)


def _translate_default(schema: FieldInfo, ctx: _Context, path: str) -> Dict[str, Any]:
    mark = len(ctx.unsupported)
    node = _translate_field(schema, ctx, path)
    if _fell_back(ctx, path, mark):
        return node
    if schema.default_factory is not None:
        try:
            value = schema.default_factory()
        except TypeError:
            # factories taking validated data have no standalone default
            return node
    else:
        value = schema.default
    node["default"] = to_jsonable_python(value, fallback=repr)
    return node


def _translate_record(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    args = get_args(schema)
    value = args[1] if len(args) == 2 else Any
    return {
        "type": "object",
        "additionalProperties": _translate(value, ctx, f"{path}.additionalProperties"),
    }


def _translate_raw(schema: Dict[str, Any], ctx: _Context, path: str) -> Dict[str, Any]:
    return copy.deepcopy(schema)


def _fallback(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    ctx.unsupported.append(path)
    return dict(FALLBACK_SCHEMA)


_TRANSLATORS: Dict[SchemaKind, Callable[[Any, _Context, str], Dict[str, Any]]] = {
    SchemaKind.STRING: _primitive(SchemaKind.STRING),
    SchemaKind.NUMBER: _primitive(SchemaKind.NUMBER),
    SchemaKind.INTEGER: _primitive(SchemaKind.INTEGER),
    SchemaKind.BOOLEAN: _primitive(SchemaKind.BOOLEAN),
    SchemaKind.ARRAY: _translate_array,
    SchemaKind.OBJECT: _translate_object,
    SchemaKind.ENUM: _translate_enum,
    SchemaKind.LITERAL: _translate_literal,
    SchemaKind.UNION: _translate_union,
    SchemaKind.NULLABLE: _translate_nullable,
    SchemaKind.OPTIONAL: _translate_field,
    SchemaKind.DEFAULT: _translate_default,
    SchemaKind.FIELD: _translate_field,
    SchemaKind.RECORD: _translate_record,
    SchemaKind.RAW: _translate_raw,
    SchemaKind.UNSUPPORTED: _fallback,
}


def _translate(schema: Any, ctx: _Context, path: str) -> Dict[str, Any]:
    return _TRANSLATORS[classify(schema)](schema, ctx, path)


def translate_schema(schema: Any) -> Translation:
    """Translate ``schema`` and report every construct that fell back."""
    ctx = _Context()
    node = _translate(schema, ctx, "$")
    return Translation(schema=node, unsupported=ctx.unsupported)


def translate(schema: Any, strict: bool = False) -> Dict[str, Any]:
    """Translate ``schema`` into a schema object.

    With ``strict`` an :class:`UnsupportedSchemaError` is raised instead of
    silently falling back to ``{"type": "object"}``.
    """
    result = translate_schema(schema)
    if strict and not result.complete:
        raise UnsupportedSchemaError(result.unsupported)
    return result.schema


__all__ = [
    "SchemaKind",
    "Translation",
    "FALLBACK_SCHEMA",
    "classify",
    "translate",
    "translate_schema",
]
