"""Docs helpers."""
import functools
import inspect
from collections.abc import Callable, Sequence
from typing import Any, Optional, Type, TypeVar, Union, cast, get_args, get_origin

from attrs import Attribute, fields
from blacksheep.server.openapi.common import ContentInfo, ResponseInfo
from blacksheep.server.openapi.v3 import FieldInfo, ObjectTypeHandler, OpenAPIHandler
from oes.skating.serialization import get_converter
from oes.skating.util import to_camel_case
from openapidocs.v3 import Info, Reference, Schema

T = TypeVar("T")

docs = OpenAPIHandler(
    info=Info(
        title="OES Skating Competition API",
        version="0.1",
    ),
)
"""Docs object."""


class AttrsTypeHandler(ObjectTypeHandler):
    """Schema generator for attrs classes."""

    _no_register_types = (
        int,
        float,
        str,
        bool,
        Any,
    )

    def __init__(self, docs: OpenAPIHandler):
        self.docs = docs

    def handles_type(self, object_type) -> bool:
        return hasattr(object_type, "__attrs_attrs__")

    def get_schema(self, type_) -> Union[Schema, Reference]:
        if type_ in self._no_register_types:
            return self.docs.get_schema_by_type(type_)
        else:
            return self.docs.register_schema_for_type(type_)

    def is_optional(self, type_) -> bool:
        if get_origin(type_) is Union:
            args = get_args(type_)
            return len(args) == 2 and type(None) in args
        else:
            return False

    def get_field_info(self, field: Attribute) -> FieldInfo:
        # field names are documented as they appear on the wire
        return FieldInfo(to_camel_case(field.name), field.type)

    def get_type_fields(self, object_type) -> list[FieldInfo]:
        return [self.get_field_info(field) for field in fields(object_type)]


docs.object_types_handlers.append(AttrsTypeHandler(docs))


def _get_serializer(type_: object) -> Callable[[object], Any]:
    if isinstance(type_, type) or get_origin(type_) is not None:
        return lambda v: get_converter().unstructure(v, unstructure_as=type_)
    elif callable(type_):
        return type_
    else:
        return lambda v: v


def serialize(type_: T):
    """Serialize the return value using the given type."""
    serializer = _get_serializer(type_)

    def decorator(fn):
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def wrapper(*args, **kwargs):
                response = await fn(*args, **kwargs)
                return serializer(response)

        else:

            @functools.wraps(fn)
            def wrapper(*args, **kwargs):
                response = fn(*args, **kwargs)
                return serializer(response)

        return wrapper

    return decorator


def docs_helper(
    *,
    response_type: Optional[object] = None,
    response_summary: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
):
    """Decorate view handlers with documentation."""
    responses = {}

    def serialize_decorator(v):
        return v

    if response_type is not None:
        responses[200] = ResponseInfo(
            description=response_summary or "The result",
            content=[
                ContentInfo(
                    type=cast(Type, response_type),
                )
            ],
        )

        serialize_decorator = serialize(response_type)  # noqa

    docs_decorator = docs(
        responses=responses,
        tags=tags,
    )

    def decorator(fn):
        fn = serialize_decorator(fn)
        fn = docs_decorator(fn)
        return fn

    return decorator
