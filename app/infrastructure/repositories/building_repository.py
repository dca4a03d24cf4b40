"""Persistence helpers for building entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Building, BuildingAddress
from app.infrastructure.models import BuildingModel


class BuildingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, building_id: str) -> Building | None:
        model = self.session.get(BuildingModel, building_id)
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: BuildingModel) -> Building:
        return Building(
            id=model.id,
            client_id=model.client_id,
            address=BuildingAddress(
                street_number=model.street_number,
                street_address=model.street_address,
                city=model.city,
            ),
        )


__all__ = ["BuildingRepository"]
