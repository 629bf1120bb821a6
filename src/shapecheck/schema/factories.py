"""Factory functions for building schemas.

These are the intended entry points (``sc.string()``, ``sc.object({...})``);
several deliberately share names with builtins, so this module refers to the
builtins through the ``builtins`` module.

Every factory accepts the custom message keywords ``required_error`` and
``invalid_type_error`` (and ``description``).
"""

import builtins
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from shapecheck.config import get_config
from shapecheck.schema.base import Schema
from shapecheck.schema.containers import (
    ArraySchema,
    MapSchema,
    RecordSchema,
    SetSchema,
    TupleSchema,
)
from shapecheck.schema.objects import ObjectSchema, UnknownKeys
from shapecheck.schema.primitives import (
    AnySchema,
    BigIntSchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    InstanceOfSchema,
    LiteralSchema,
    NativeEnumSchema,
    NumberSchema,
    StringSchema,
)
from shapecheck.schema.unions import DiscriminatedUnionSchema, UnionSchema


# --- Scalars ---


def string(**options: Any) -> StringSchema:
    return StringSchema(**options)


def number(**options: Any) -> NumberSchema:
    return NumberSchema(**options)


def bigint(**options: Any) -> BigIntSchema:
    return BigIntSchema(**options)


def boolean(**options: Any) -> BooleanSchema:
    return BooleanSchema(**options)


def date(**options: Any) -> DateSchema:
    return DateSchema(**options)


def literal(value: Any, **options: Any) -> LiteralSchema:
    return LiteralSchema(value=value, **options)


def enum(values: Iterable[str], **options: Any) -> EnumSchema:
    return EnumSchema(values=builtins.tuple(values), **options)


def native_enum(enum_cls: type[Enum], **options: Any) -> NativeEnumSchema:
    return NativeEnumSchema(enum=enum_cls, **options)


def instance_of(cls: type, **options: Any) -> InstanceOfSchema:
    return InstanceOfSchema(cls=cls, **options)


def any(**options: Any) -> AnySchema:
    return AnySchema(**options)


# --- Objects ---


def object(
    fields: Mapping[str, Schema] | None = None,
    unknown_keys: UnknownKeys | None = None,
    **options: Any,
) -> ObjectSchema:
    """Object schema with declared ``fields``.

    ``unknown_keys`` defaults to the configured ``default_unknown_keys``.
    """
    policy = unknown_keys or get_config().default_unknown_keys
    return ObjectSchema(fields=fields or {}, unknown_keys=policy, **options)


# --- Collections ---


def array(element: Schema, **options: Any) -> ArraySchema:
    return ArraySchema(element=element, **options)


def tuple(items: Iterable[Schema], rest: Schema | None = None, **options: Any) -> TupleSchema:
    return TupleSchema(items=builtins.tuple(items), rest_schema=rest, **options)


def record(key_or_value: Schema, value: Schema | None = None, **options: Any) -> RecordSchema:
    """``record(value)`` uses string keys; ``record(key, value)`` validates keys too."""
    if value is None:
        return RecordSchema(value_schema=key_or_value, **options)
    return RecordSchema(key_schema=key_or_value, value_schema=value, **options)


def map(key: Schema, value: Schema, **options: Any) -> MapSchema:
    return MapSchema(key_schema=key, value_schema=value, **options)


def set(element: Schema, **options: Any) -> SetSchema:
    return SetSchema(element=element, **options)


# --- Unions ---


def union(options: Iterable[Schema], **kwargs: Any) -> UnionSchema:
    return UnionSchema(options=builtins.tuple(options), **kwargs)


def discriminated_union(
    discriminator: str, options: Iterable[ObjectSchema], **kwargs: Any
) -> DiscriminatedUnionSchema:
    return DiscriminatedUnionSchema(
        discriminator=discriminator, options=builtins.tuple(options), **kwargs
    )
