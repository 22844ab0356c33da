from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field

T = TypeVar("T")


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    items: list[T]
    page: int
    size: int
    total: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    def convert(self, schema: type[BaseModel]) -> "Page":
        """Page d'entités ORM -> page de schémas de lecture."""
        return Page[schema](
            items=[schema.model_validate(item) for item in self.items],
            page=self.page,
            size=self.size,
            total=self.total,
        )


def updated_fields(payload: BaseModel) -> dict:
    """
    Champs réellement fournis dans un payload de mise à jour partielle.

    Un champ absent n'est jamais appliqué ; un champ envoyé à null est ignoré
    aussi (seules les valeurs non nulles écrasent l'entité).
    """
    return {
        name: getattr(payload, name)
        for name in payload.model_fields_set
        if getattr(payload, name) is not None
    }
