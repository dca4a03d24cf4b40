"""Helpers shared by the ORM models."""

from uuid import uuid4

from sqlalchemy.dialects.mssql import JSON as MSSQLJSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON


def new_id() -> str:
    """Return a new server-generated identifier."""

    return str(uuid4())


json_type = (
    JSONB().with_variant(JSON(), "sqlite").with_variant(MSSQLJSON(), "mssql")
)


__all__ = ["new_id", "json_type"]
