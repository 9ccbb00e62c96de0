"""Converter for working with user input.

Attrs classes are exchanged with ``camelCase`` keys, and ``None`` values of
optional fields are omitted when unstructuring.
"""
from builtins import issubclass
from collections.abc import Sequence
from enum import Enum
from typing import Tuple, Union, get_args, get_origin

from attr import resolve_types
from attrs import fields, has
from cattrs import Converter
from cattrs.gen import make_dict_structure_fn, make_dict_unstructure_fn, override
from oes.skating.serialization.common import CustomConverter
from oes.skating.serialization.common import (
    configure_converter as configure_common,
)
from oes.skating.util import to_camel_case
from oes.skating.views.responses import ExceptionDetails

converter = CustomConverter()
configure_common(converter)


# Sequence[T] is structured as tuple[T, ...]
def structure_sequence(c, v, t):
    args = get_args(t)
    return c.structure(v, Tuple[args[0], ...])


def structure_without_cast(v, t):
    """Structure a type without attempting to cast the value.

    Booleans are only accepted for ``bool``, and floats are only accepted for
    ``int`` when they have no fractional part.
    """
    if isinstance(v, bool) or t is bool:
        if isinstance(v, bool) and t is bool:
            return v
        raise TypeError(f"Invalid type: {v!r}")
    elif isinstance(v, t):
        return v
    elif issubclass(t, int) and isinstance(v, float) and not v.is_integer():
        raise TypeError(f"Invalid type: {v!r}")
    elif (
        issubclass(t, (int, float))
        and isinstance(v, (int, float))
        or issubclass(t, Enum)
        and isinstance(v, (int, str))
    ):
        return t(v)
    else:
        raise TypeError(f"Invalid type: {v!r}")



def _is_nullable(t):
    origin = get_origin(t)
    args = get_args(t)
    return origin is Union and type(None) in args


def _camel_case_overrides(t):
    return {f.name: override(rename=to_camel_case(f.name)) for f in fields(t)}


def make_structure_dict_camel_case(c, t):
    """Make a structure function that reads ``camelCase`` keys."""

    # Resolve types because some field types might just be strings
    resolve_types(t)

    return make_dict_structure_fn(t, c, **_camel_case_overrides(t))


def make_unstructure_dict_omitting_none(c, t):
    """Make an unstructure function with ``camelCase`` keys that omits None."""
    resolve_types(t)

    nullable_keys = [
        to_camel_case(f.name) for f in fields(t) if _is_nullable(f.type)
    ]

    unstructure_fn = make_dict_unstructure_fn(t, c, **_camel_case_overrides(t))

    def unstructure(v):
        dict_ = unstructure_fn(v)
        for key in nullable_keys:
            if key in dict_ and dict_[key] is None:
                del dict_[key]
        return dict_

    return unstructure


def configure_converter(c: Converter):
    for t in (float, int, bool, str):
        c.register_structure_hook(t, structure_without_cast)

    c.register_structure_hook_factory(
        lambda cls: get_origin(cls) is Sequence,
        lambda cls: lambda v, t: structure_sequence(c, v, t),
    )

    # attrs classes use camelCase keys
    c.register_structure_hook_factory(
        has,
        lambda cls: make_structure_dict_camel_case(c, cls),
    )

    # unstructure attrs classes omitting None
    c.register_unstructure_hook_factory(
        has,
        lambda cls: make_unstructure_dict_omitting_none(c, cls),
    )

    # Exception details
    c.register_unstructure_hook_factory(
        lambda cls: isinstance(cls, type) and issubclass(cls, ExceptionDetails),
        lambda cls: make_dict_unstructure_fn(
            ExceptionDetails,
            c,
            _cattrs_omit_if_default=True,
        ),
    )


configure_converter(converter)
