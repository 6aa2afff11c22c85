"""
Database Models for URL Cutter Service

This module defines the SQLModel tables of the sequence-keyed store and
the record stored for every entry:
- Collection: A named group of entries with its own durable counter
- Entry: One short key -> serialized EntryRecord row
- EntryRecord: The fixed, versioned payload written into Entry.value

Design Decisions:
- Counter lives in the collections table and is advanced inside the same
  transaction that writes the entry, so a rolled back insert leaves no gap
- Entry rows are keyed by (collection, key); the key is never reused
- The payload is a tagged JSON record rather than free-form columns, so
  the storage format can be versioned without a table migration
"""

from typing import Literal

from pydantic import BaseModel, ValidationError
from sqlalchemy import BigInteger, Column, LargeBinary, String
from sqlmodel import Field, SQLModel

ENTRY_RECORD_VERSION = 1

# First sequence number handed out by an empty collection.
COUNTER_ORIGIN = 1


class Collection(SQLModel, table=True):
    """
    Named collection ("bucket") with its insert counter.

    Fields:
    - name: Collection name (primary key)
    - sequence: Last sequence number handed out; 0 is never stored,
      the row is created with COUNTER_ORIGIN by the first insert
    """
    __tablename__ = "collections"

    name: str = Field(sa_column=Column(String(64), primary_key=True))
    sequence: int = Field(sa_column=Column(BigInteger, nullable=False))


class Entry(SQLModel, table=True):
    """
    Stored entry: short key -> serialized EntryRecord.

    Fields:
    - collection: Owning collection name
    - key: Base58 short key derived from the collection counter
    - value: EntryRecord.to_bytes() output
    """
    __tablename__ = "entries"

    collection: str = Field(sa_column=Column(String(64), primary_key=True))
    key: str = Field(sa_column=Column(String(20), primary_key=True))
    value: bytes = Field(sa_column=Column(LargeBinary, nullable=False))


class EntryRecord(BaseModel):
    """The persisted {key, target URL} record."""

    v: Literal[1] = ENTRY_RECORD_VERSION
    key: str
    target_url: str

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "EntryRecord":
        """
        Decode a stored value.

        Raises:
            ValueError: If data is empty or not a valid record
        """
        if not data:
            raise ValueError("empty entry value")
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise ValueError(f"corrupt entry value: {e}") from e
