# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

from taskledger.model.entity_id import EntityId

ChangeKind = Literal["insert", "update", "delete"]


class TaskChange(TypedDict):
    kind: ChangeKind
    task_id: EntityId
    owner_id: Optional[EntityId]
