from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

import pytest
from pydantic import BaseModel, Field

from flask_asyncapi.exceptions import UnsupportedSchemaError
from flask_asyncapi.translator import SchemaKind, classify, translate, translate_schema


class Color(str, Enum):
    RED = 'red'
    GREEN = 'green'


class Address(BaseModel):
    street: str
    zip_code: Optional[str] = None


class User(BaseModel):
    """A registered user."""
    name: str = Field(description='Display name')
    age: int
    email: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    role: str = 'member'
    address: Address


class Cat(BaseModel):
    pet_type: Literal['cat']
    meows: int


class Dog(BaseModel):
    pet_type: Literal['dog']
    barks: float


class Owner(BaseModel):
    pet: Union[Cat, Dog] = Field(discriminator='pet_type')


class Node(BaseModel):
    value: int
    children: List['Node'] = Field(default_factory=list)


def test_primitives():
    assert translate(str) == {'type': 'string'}
    assert translate(float) == {'type': 'number'}
    assert translate(int) == {'type': 'integer'}
    assert translate(bool) == {'type': 'boolean'}


def test_array_of_primitives():
    assert translate(List[str]) == {'type': 'array', 'items': {'type': 'string'}}
    assert translate(list[int]) == {'type': 'array', 'items': {'type': 'integer'}}


def test_object_required_and_optional_fields():
    schema = translate(User)
    assert schema['type'] == 'object'
    assert list(schema['properties']) == ['name', 'age', 'email', 'tags', 'role', 'address']
    # required in declaration order, only fields without defaults
    assert schema['required'] == ['name', 'age', 'address']
    assert schema['description'] == 'A registered user.'


def test_object_without_required_fields_omits_required():
    class Filters(BaseModel):
        q: Optional[str] = None
        limit: int = 50

    schema = translate(Filters)
    assert 'required' not in schema
    assert schema['properties']['limit'] == {'type': 'integer', 'default': 50}


def test_field_description_overlay():
    schema = translate(User)
    assert schema['properties']['name'] == {'type': 'string', 'description': 'Display name'}


def test_default_wrapper_resolves_factory():
    schema = translate(User)
    assert schema['properties']['tags'] == {'type': 'array', 'items': {'type': 'string'}, 'default': []}
    assert schema['properties']['role'] == {'type': 'string', 'default': 'member'}


def test_optional_field_is_nullable_without_default():
    schema = translate(User)
    assert schema['properties']['email'] == {'type': 'string', 'nullable': True}


def test_nullable_preserves_inner_keys():
    inner = translate(Address)
    wrapped = translate(Optional[Address])
    assert wrapped.pop('nullable') is True
    assert wrapped == inner


def test_enum():
    assert translate(Color) == {'type': 'string', 'enum': ['red', 'green']}


def test_literal():
    assert translate(Literal['message']) == {'type': 'string', 'enum': ['message']}
    assert translate(Literal[3]) == {'type': 'number', 'enum': [3]}
    assert translate(Literal[True]) == {'type': 'boolean', 'enum': [True]}


def test_union_becomes_one_of():
    schema = translate(Union[str, int])
    assert schema == {'oneOf': [{'type': 'string'}, {'type': 'integer'}]}


def test_discriminated_union():
    schema = translate(Owner)
    pet = schema['properties']['pet']
    assert len(pet['oneOf']) == 2
    assert pet['oneOf'][0]['properties']['pet_type'] == {'type': 'string', 'enum': ['cat']}


def test_nullable_union():
    schema = translate(Optional[Union[str, int]])
    assert schema['nullable'] is True
    assert len(schema['oneOf']) == 2


def test_record():
    assert translate(Dict[str, int]) == {'type': 'object', 'additionalProperties': {'type': 'integer'}}


def test_annotated_description():
    schema = translate(Annotated[str, Field(description='Room id')])
    assert schema == {'type': 'string', 'description': 'Room id'}


def test_raw_schema_passes_through_as_copy():
    raw = {'type': 'string', 'format': 'date-time', 'x-extra': 1}
    out = translate(raw)
    assert out == raw
    assert out is not raw


def test_unsupported_falls_back_to_object():
    class Opaque:
        pass

    assert translate(Opaque) == {'type': 'object'}
    assert translate(Any) == {'type': 'object'}
    assert translate(Dict[str, Any]) == {'type': 'object', 'additionalProperties': {'type': 'object'}}


def test_translation_reports_unsupported_locations():
    class Event(BaseModel):
        name: str
        data: Any

    result = translate_schema(Event)
    assert not result.complete
    assert result.unsupported == ['$.properties.data']
    assert result.schema['properties']['data'] == {'type': 'object'}


def test_fallback_node_ignores_field_metadata():
    class Envelope(BaseModel):
        body: Any = Field(description='Opaque body')
        extra: Any = Field(default=1, description='Opaque extra')
        note: str = Field(description='Plain note')

    result = translate_schema(Envelope)
    assert result.schema['properties']['body'] == {'type': 'object'}
    assert result.schema['properties']['extra'] == {'type': 'object'}
    assert result.schema['properties']['note'] == {'type': 'string', 'description': 'Plain note'}
    assert result.unsupported == ['$.properties.body', '$.properties.extra']
    assert translate(Annotated[Any, Field(description='x')]) == {'type': 'object'}


def test_strict_mode_raises():
    with pytest.raises(UnsupportedSchemaError) as exc:
        translate(List[Any], strict=True)
    assert exc.value.locations == ['$.items']


def test_recursive_model_does_not_recurse_forever():
    result = translate_schema(Node)
    children = result.schema['properties']['children']
    assert children['items'] == {'type': 'object'}
    assert result.unsupported == ['$.properties.children.items']


def test_every_kind_yields_type_or_one_of():
    samples = [str, int, float, bool, List[str], User, Color, Literal['x'], Union[str, int],
               Optional[str], Dict[str, str], Annotated[int, Field(description='n')], object]
    for sample in samples:
        out = translate(sample)
        assert 'type' in out or 'oneOf' in out


def test_classify():
    assert classify(User) is SchemaKind.OBJECT
    assert classify(Optional[int]) is SchemaKind.NULLABLE
    assert classify(User.model_fields['email']) is SchemaKind.OPTIONAL
    assert classify(User.model_fields['role']) is SchemaKind.DEFAULT
    assert classify(User.model_fields['age']) is SchemaKind.FIELD
    assert classify(object) is SchemaKind.UNSUPPORTED


def test_translation_is_deterministic():
    assert translate(User) == translate(User)
