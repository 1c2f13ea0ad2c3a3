# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from taskledger.model.entity_id import EntityId, generate_entity_id
from taskledger.model.task import SubItem, Task
from taskledger.time import now_utc, today_local


def get_task_template(
    owner_id: Optional[EntityId] = None,
    scheduled_date: Optional[pendulum.Date] = None,
) -> Task:
    now = now_utc()
    return {
        "id": None,
        "owner_id": owner_id,
        "cloned_from_id": None,
        "title": "",
        "description": None,
        "observations": None,
        "type": "own-task",
        "priority": "none",
        "category": "personal",
        "time_investment": "low",
        "custom_time_minutes": None,
        "assigned_person_id": None,
        "status": "pending",
        "scheduled_date": scheduled_date if scheduled_date is not None else today_local(),
        "order": 0,
        "delivery_dates": [],
        "sub_items": [],
        "completion_history": [],
        "forward_history": [],
        "forward_count": 0,
        "is_concluded": False,
        "concluded_at": None,
        "is_routine": False,
        "routine_cycle": None,
        "created": now,
        "updated": now,
    }


def get_sub_item_template(text: str, order: int) -> SubItem:
    return {
        "id": generate_entity_id(),
        "text": text,
        "completed": False,
        "not_done": False,
        "order": order,
        "subject": None,
        "created": now_utc(),
    }
