"""Base entity objects."""
from datetime import datetime
from typing import Annotated

from oes.skating.util import generate_id
from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, mapped_column

DEFAULT_MAX_STRING_LENGTH = 300
"""Default maximum length of a string."""

DEFAULT_MAX_ENUM_LENGTH = 24
"""Default length of an enum string value."""

ID_MAX_LENGTH = 64
"""Maximum length of a record ID."""

DEFAULT_CASCADE_DELETE = "save-update, merge, expunge, delete"
"""Default relationship cascade configuration, with delete."""

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=naming_convention)

PKStr = Annotated[
    str,
    mapped_column(String(ID_MAX_LENGTH), primary_key=True, default=generate_id),
]
"""String primary key type."""


class Base(DeclarativeBase):
    """Entity base class."""

    metadata = metadata
    type_annotation_map = {
        datetime: DateTime(timezone=True),
        str: String(DEFAULT_MAX_STRING_LENGTH),
    }


def import_entities():
    """Import all modules that contain entities."""
    from oes.skating.entities import competition  # noqa
    from oes.skating.entities import event  # noqa
    from oes.skating.entities import registration  # noqa
    from oes.skating.entities import user  # noqa
