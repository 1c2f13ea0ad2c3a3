# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

from taskledger.model.entity_id import EntityId

ReconciliationKind = Literal["orphaned-seal", "unsealed-predecessor"]


class ReconciliationRecord(TypedDict):
    """
    A detected half-applied reschedule.

    orphaned-seal: the predecessor was sealed but its successor is missing.
    unsealed-predecessor: a successor exists but its predecessor was never
    sealed.
    """

    id: Optional[EntityId]
    owner_id: Optional[EntityId]
    task_id: EntityId
    kind: ReconciliationKind
    detail: str
    created: pendulum.DateTime
    resolved: Optional[pendulum.DateTime]
