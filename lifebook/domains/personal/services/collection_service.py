"""Owner-scoped CRUD shared by goals, beliefs, triggers and protocols."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Type

from pydantic import BaseModel

from lifebook.core import records
from lifebook.domains.personal.schemas.personal_schemas import (
    BeliefCreate,
    BeliefUpdate,
    GoalCreate,
    GoalUpdate,
    ProtocolCreate,
    ProtocolUpdate,
    TriggerCreate,
    TriggerUpdate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnedCollection:
    entity: str
    label: str
    plural: str
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    filter_field: Optional[str] = None

    def list_records(self, user_id: int, value: Optional[str] = None) -> list[dict]:
        filters = {self.filter_field: value} if self.filter_field and value else None
        return records.list_owned(self.entity, user_id, filters=filters)

    def get(self, user_id: int, record_id: int) -> dict:
        return records.get_owned(self.entity, user_id, record_id, label=self.label)

    def create(self, user_id: int, data: BaseModel) -> dict:
        record = records.create_owned(self.entity, user_id, data.model_dump())
        logger.info("Created %s %s for user %s", self.label, record["id"], user_id)
        return record

    def update(self, user_id: int, record_id: int, data: BaseModel) -> dict:
        return records.update_owned(
            self.entity, user_id, record_id, data.model_dump(exclude_unset=True), label=self.label
        )

    def delete(self, user_id: int, record_id: int) -> None:
        records.delete_owned(self.entity, user_id, record_id, label=self.label)


goals = OwnedCollection("goals", "goal", "goals", GoalCreate, GoalUpdate, filter_field="status")
beliefs = OwnedCollection("beliefs", "belief", "beliefs", BeliefCreate, BeliefUpdate)
triggers = OwnedCollection(
    "anxiety_triggers", "trigger", "triggers", TriggerCreate, TriggerUpdate, filter_field="category"
)
protocols = OwnedCollection("protocols", "protocol", "protocols", ProtocolCreate, ProtocolUpdate)
