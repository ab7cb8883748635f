"""Canonical ticket record.

A ticket is a single journey event (one train or flight leg). Models and the
UI exchange it in its wire form, a flat JSON object with camelCase keys;
``normalize`` turns whatever loose object a model returns into a
``TicketRecord``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Mapping


class TransportKind(str, enum.Enum):
    TRAIN = "TRAIN"
    FLIGHT = "FLIGHT"


# attribute name -> wire key
STRING_FIELDS = (
    ("origin", "origin"),
    ("destination", "destination"),
    ("number", "number"),
    ("date", "date"),  # YYYY-MM-DD
    ("time", "time"),  # HH:mm, 24h
    ("passenger_name", "passengerName"),
    ("gate_or_seat", "gateOrSeat"),
    ("extra_info", "extraInfo"),
)


@dataclass(frozen=True)
class TicketRecord:
    transport_kind: TransportKind = TransportKind.TRAIN
    origin: str = ""
    destination: str = ""
    number: str = ""
    date: str = ""
    time: str = ""
    passenger_name: str = ""
    gate_or_seat: str = ""
    extra_info: str = ""

    def to_dict(self) -> Dict[str, str]:
        payload = {"type": self.transport_kind.value}
        for attr, key in STRING_FIELDS:
            payload[key] = getattr(self, attr)
        return payload


INITIAL_TICKET = TicketRecord()


def _text(value: Any) -> str:
    return value if isinstance(value, str) and value else ""


def normalize(raw: Any) -> TicketRecord:
    """Coerce a loose model result into a ``TicketRecord``.

    Never raises. Only the literal tag ``"FLIGHT"`` selects a flight; every
    other ``type`` (missing, misspelled, null) is a train. String fields keep a
    non-empty string value and fall back to ``""`` otherwise; values of any
    other shape are dropped rather than converted.
    """
    if isinstance(raw, TicketRecord):
        return raw
    data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    kind = TransportKind.FLIGHT if data.get("type") == TransportKind.FLIGHT.value else TransportKind.TRAIN
    return TicketRecord(
        transport_kind=kind,
        **{attr: _text(data.get(key)) for attr, key in STRING_FIELDS},
    )
