"""Serialization used internally for configuration and fixtures."""
from collections.abc import Sequence
from typing import Tuple, get_args, get_origin

from cattrs import Converter
from oes.skating.serialization.common import CustomConverter
from oes.skating.serialization.common import (
    configure_converter as configure_common,
)

converter = CustomConverter()
configure_common(converter)


# Sequence[T] is structured as tuple[T, ...]
def structure_sequence(c, v, t):
    args = get_args(t)
    return c.structure(v, Tuple[args[0], ...])


def configure_converter(c: Converter):
    c.register_structure_hook_func(
        lambda cls: get_origin(cls) is Sequence,
        lambda v, t: structure_sequence(c, v, t),
    )


configure_converter(converter)
