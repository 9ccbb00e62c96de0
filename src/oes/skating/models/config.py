"""Config models."""
from collections.abc import Sequence

from attrs import field, frozen


@frozen
class DatabaseConfig:
    url: str = field(repr=False)
    """The database URL."""


@frozen
class HTTPConfig:
    allowed_origins: Sequence[str] = ()
    """The allowed CORS origins."""


@frozen
class Config:
    """The main config class."""

    database: DatabaseConfig
    http: HTTPConfig = HTTPConfig()
