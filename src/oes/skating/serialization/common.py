"""Common converters."""
from datetime import date, datetime, timezone
from typing import Type, TypeVar, Union

from cattrs import Converter
from oes.skating.serialization.json import json_dumps, json_loads

T = TypeVar("T")


class CustomConverter(Converter):
    """Converter that uses orjson."""

    def dumps(self, obj: object, unstructure_as=None) -> bytes:
        unstructured = self.unstructure(obj, unstructure_as)
        return json_dumps(unstructured)

    def loads(self, value: Union[str, bytes], cl: Type[T]) -> T:
        obj = json_loads(value)
        return self.structure(obj, cl)


def structure_datetime(v: object) -> datetime:
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, (float, int)) and not isinstance(v, bool):
        dt = datetime.fromtimestamp(v, tz=timezone.utc)
    elif isinstance(v, str):
        dt = datetime.fromisoformat(v.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Invalid datetime: {v!r}")

    if dt.tzinfo is None:
        dt = dt.astimezone()

    return dt


def structure_date(v: object) -> date:
    if isinstance(v, datetime):
        return v.date()
    elif isinstance(v, date):
        return v
    elif isinstance(v, str) and "T" in v:
        # full timestamps from date pickers
        return structure_datetime(v).date()
    elif isinstance(v, str):
        return date.fromisoformat(v)
    else:
        raise TypeError(f"Invalid date: {v!r}")


converter = CustomConverter()

structure_funcs = {
    lambda cls: cls is datetime: lambda v, t: structure_datetime(v),
    lambda cls: cls is date: lambda v, t: structure_date(v),
}


def configure_converter(c: Converter):
    for test_func, func in structure_funcs.items():
        c.register_structure_hook_func(test_func, func)


configure_converter(converter)
