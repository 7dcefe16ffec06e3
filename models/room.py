"""Datenmodell für einen Raum (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Room(BaseModel):
    """Repräsentiert einen Unterrichtsraum. Immutable, Vergleich per Name."""

    model_config = ConfigDict(frozen=True)

    name: str  # "Room A"

    def __str__(self) -> str:
        return self.name
