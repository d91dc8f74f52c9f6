"""Conversión de fechas al formato del servidor.

El servidor serializa instantes como ISO-8601 en UTC con sufijo `Z`
(`2018-03-01T10:15:30Z`, `2018-03-01T10:15:30.123Z`). La lectura la hace
pydantic desde el campo `datetime`; aquí solo se escribe.
"""

from __future__ import annotations

from datetime import datetime, timezone


def to_server_datetime(value: datetime | None) -> str | None:
    """UTC con `Z`, sin perder fracciones de segundo."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if value.microsecond == 0:
        timespec = "seconds"
    elif value.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"
