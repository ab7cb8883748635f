"""Prompt text shared by both extraction paths."""
from __future__ import annotations

FIELD_GUIDE = """\
- type: "TRAIN" or "FLIGHT"
- origin: Departure city/station
- destination: Arrival city/station
- number: Flight number (e.g., CA1234) or Train number (e.g., G123)
- date: Date in YYYY-MM-DD format. If year is missing, assume current year.
- time: Departure time in HH:mm format (24 hour).
- passengerName: Name of the passenger if available.
- gateOrSeat: Seat number (for train) or Gate/Seat (for flight).
- extraInfo: Any short important note (e.g., "Check terminal 2")."""

JSON_ONLY_SYSTEM_PROMPT = "You are a JSON parser. Output only valid JSON."


def structured_prompt(text: str) -> str:
    return (
        "Analyze the following text which contains travel information "
        "(either a flight or a train ticket).\n"
        "Extract the following information into a strict JSON object:\n"
        f"{FIELD_GUIDE}\n\n"
        f'Input Text:\n"{text}"'
    )


def chat_prompt(text: str) -> str:
    return (
        "You are a helpful assistant that parses travel tickets.\n"
        f'Analyze the following text: "{text}"\n\n'
        "Return a JSON object with the following fields:\n"
        f"{FIELD_GUIDE}\n\n"
        "RETURN ONLY JSON. NO MARKDOWN."
    )
