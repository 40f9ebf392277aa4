"""
repositories/singer_row.py
--------------------------
Conversion between the Singer domain model and rows of the `singers` table.

Nullability is explicit only here: a `SingerRow` holds `None` for NULL
columns, while the domain model uses '' for absent names and None for an
absent birth date. The `info` structure is stored as a UTF-8 JSON blob.
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Optional

from models.singer import CreatePayload, Singer, SingerInfo, as_date
from repositories.exceptions import BadValueError

TABLE_NAME = "singers"
COLUMNS = ("singer_id", "first_name", "last_name", "singer_info", "birth_date")


def encode_info(info: SingerInfo) -> bytes:
    """
    Encode singer info as compact JSON.

    Raises:
        BadValueError: If songs/awards are not lists of strings.
    """
    try:
        for key, values in (("songs", info.songs), ("awards", info.awards)):
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise TypeError(f"info.{key} must be a list of strings")
        return json.dumps(
            {"songs": info.songs, "awards": info.awards},
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError, AttributeError) as e:
        raise BadValueError(f"Cannot encode singer info: {e}", cause=e) from e


def _field(data: dict, key: str):
    if key in data:
        return data[key]
    for name, value in data.items():
        if isinstance(name, str) and name.lower() == key:
            return value
    return None


def decode_info(blob) -> SingerInfo:
    """
    Decode a stored info blob.

    An empty or NULL blob is treated as corrupt, not as empty info.
    Keys match case-insensitively (`Songs` reads as `songs`), an exact
    match winning. A missing `songs` or `awards` key decodes to an empty list.

    Raises:
        BadValueError: If the blob is empty or not a valid info document.
    """
    try:
        if blob is None or len(blob) == 0:
            raise ValueError("info blob is empty")
        data = json.loads(bytes(blob).decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"info must be a JSON object, got {type(data).__name__}")
        songs, awards = _field(data, "songs"), _field(data, "awards")
        songs = [] if songs is None else songs
        awards = [] if awards is None else awards
        for key, values in (("songs", songs), ("awards", awards)):
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise ValueError(f"info.{key} must be a list of strings")
        return SingerInfo(songs=list(songs), awards=list(awards))
    except (TypeError, ValueError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors.
        raise BadValueError(f"Corrupt singer info: {e}", cause=e) from e


@dataclass
class SingerRow:
    """One row of the `singers` table; `None` means NULL."""
    singer_id: int
    first_name: Optional[str]
    last_name: Optional[str]
    singer_info: bytes
    birth_date: Optional[date]

    @classmethod
    def from_payload(cls, payload: CreatePayload) -> "SingerRow":
        """
        Build the row to insert for a create payload.

        Empty names and a missing birth date become NULL.

        Raises:
            BadValueError: If the info or birth date cannot be stored.
        """
        try:
            birth_date = as_date(payload.birth_date)
        except TypeError as e:
            raise BadValueError(f"Invalid birth date: {e}", cause=e) from e
        return cls(
            singer_id=payload.singer_id,
            first_name=payload.first_name or None,
            last_name=payload.last_name or None,
            singer_info=encode_info(payload.info),
            birth_date=birth_date,
        )

    @classmethod
    def from_db(cls, row: tuple) -> "SingerRow":
        """Wrap a database row tuple in COLUMNS order."""
        return cls(
            singer_id=row[0],
            first_name=row[1],
            last_name=row[2],
            singer_info=row[3],
            birth_date=row[4],
        )

    def as_params(self) -> dict:
        """Named parameters for an INSERT over COLUMNS."""
        return {
            "singer_id": self.singer_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "singer_info": self.singer_info,
            "birth_date": self.birth_date,
        }

    def to_singer(self) -> Singer:
        """
        Convert the row to a Singer domain object.

        Raises:
            BadValueError: If the stored info blob is corrupt.
        """
        return Singer(
            singer_id=self.singer_id,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            info=decode_info(self.singer_info),
            birth_date=as_date(self.birth_date),
        )
