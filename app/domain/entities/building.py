"""Domain entity representing a managed building."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BuildingAddress:
    street_number: str | None
    street_address: str | None
    city: str | None

    def format(self) -> str:
        """Return ``"<number> <street>, <city>"`` skipping missing parts."""

        street = " ".join(
            part for part in (self.street_number, self.street_address) if part
        ).strip()
        parts = [part for part in (street, (self.city or "").strip()) if part]
        return ", ".join(parts)


@dataclass
class Building:
    id: str
    client_id: str | None
    address: BuildingAddress


__all__ = ["Building", "BuildingAddress"]
