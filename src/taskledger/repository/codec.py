# SPDX-License-Identifier: MIT

"""
Mapping between the domain Task and a storage row.

Rows use the column names of the hosted tasks table: snake_case columns,
JSON text blobs with camelCase keys for the checklist and the two history
logs, a JSON array string for delivery dates, ISO-8601 timestamps and
'YYYY-MM-DD' calendar dates. Both directions are pure and lossless.
"""

import json
from typing import Any, Optional, cast

from taskledger import time
from taskledger.model.task import (
    CompletionEntry,
    ForwardRecord,
    SubItem,
    Task,
    TaskUpdate,
)

# domain key -> row column, for the keys that are renamed
_RENAMED_COLUMNS = {
    "owner_id": "user_id",
    "order": "task_order",
    "created": "created_at",
    "updated": "updated_at",
}

_PLAIN_COLUMNS = (
    "id",
    "cloned_from_id",
    "title",
    "description",
    "observations",
    "type",
    "priority",
    "category",
    "time_investment",
    "custom_time_minutes",
    "assigned_person_id",
    "status",
    "forward_count",
    "is_concluded",
    "is_routine",
    "routine_cycle",
)


def column_for(key: str) -> str:
    return _RENAMED_COLUMNS.get(key, key)


def _sub_item_to_blob(sub_item: SubItem) -> dict[str, Any]:
    return {
        "id": sub_item["id"],
        "text": sub_item["text"],
        "completed": sub_item["completed"],
        "notDone": sub_item["not_done"],
        "order": sub_item["order"],
        "subject": sub_item["subject"],
        "createdAt": time.datetime_to_iso_str(sub_item["created"]),
    }


def _sub_item_from_blob(blob: dict[str, Any]) -> SubItem:
    return {
        "id": blob["id"],
        "text": blob["text"],
        "completed": bool(blob.get("completed", False)),
        "not_done": bool(blob.get("notDone", False)),
        "order": int(blob.get("order", 0)),
        "subject": blob.get("subject"),
        "created": time.datetime_from_str(blob["createdAt"]),
    }


def _completion_to_blob(entry: CompletionEntry) -> dict[str, Any]:
    blob: dict[str, Any] = {
        "completedAt": time.datetime_to_iso_str(entry["completed_at"]),
        "status": entry["status"],
        "date": time.date_to_str(entry["date"]),
        "wasForwarded": entry["was_forwarded"],
    }
    if entry["status"] == "reverted":
        blob["revertedStatus"] = entry["reverted_status"]
    return blob


def _completion_from_blob(blob: dict[str, Any]) -> CompletionEntry:
    entry: dict[str, Any] = {
        "completed_at": time.datetime_from_str(blob["completedAt"]),
        "status": blob["status"],
        "date": time.date_from_str(blob["date"]),
        "was_forwarded": bool(blob.get("wasForwarded", False)),
    }
    if blob["status"] == "reverted":
        entry["reverted_status"] = blob["revertedStatus"]
    return cast(CompletionEntry, entry)


def _forward_to_blob(record: ForwardRecord) -> dict[str, Any]:
    return {
        "forwardedAt": time.datetime_to_iso_str(record["forwarded_at"]),
        "forwardedTo": record["forwarded_to"],
        "originalDate": time.date_to_str(record["original_date"]),
        "newDate": time.date_to_str(record["new_date"]),
        "statusAtForward": record["status_at_forward"],
        "reason": record["reason"],
    }


def _forward_from_blob(blob: dict[str, Any]) -> ForwardRecord:
    return {
        "forwarded_at": time.datetime_from_str(blob["forwardedAt"]),
        "forwarded_to": blob.get("forwardedTo"),
        "original_date": time.date_from_str(blob["originalDate"]),
        "new_date": time.date_from_str(blob["newDate"]),
        "status_at_forward": blob["statusAtForward"],
        "reason": blob.get("reason", ""),
    }


def _load_blob(value: Optional[str | list[Any]]) -> list[Any]:
    # Rows written by older clients may hold null or an already-decoded list
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    decoded = json.loads(value)
    return decoded if decoded is not None else []


def _encode_field(key: str, value: Any) -> Any:
    if key == "scheduled_date":
        return time.date_to_str(value)
    if key == "delivery_dates":
        return json.dumps([time.date_to_str(date) for date in value])
    if key == "sub_items":
        return json.dumps([_sub_item_to_blob(item) for item in value])
    if key == "completion_history":
        return json.dumps([_completion_to_blob(entry) for entry in value])
    if key == "forward_history":
        return json.dumps([_forward_to_blob(record) for record in value])
    if key in ("concluded_at", "created", "updated"):
        return time.datetime_to_iso_str_optional(value)
    return value


def task_to_row(task: Task) -> dict[str, Any]:
    return {column_for(key): _encode_field(key, value) for key, value in task.items()}


def update_to_row(fields: TaskUpdate) -> dict[str, Any]:
    return {
        column_for(key): _encode_field(key, value) for key, value in fields.items()
    }


def task_from_row(row: dict[str, Any]) -> Task:
    task: dict[str, Any] = {key: row.get(key) for key in _PLAIN_COLUMNS}
    task["owner_id"] = row.get("user_id")
    task["order"] = row.get("task_order") or 0
    task["forward_count"] = row.get("forward_count") or 0
    task["is_concluded"] = bool(row.get("is_concluded", False))
    task["is_routine"] = bool(row.get("is_routine", False))
    task["scheduled_date"] = time.date_from_str(row["scheduled_date"])
    task["delivery_dates"] = [
        time.date_from_str(date) for date in _load_blob(row.get("delivery_dates"))
    ]
    task["sub_items"] = [
        _sub_item_from_blob(blob) for blob in _load_blob(row.get("sub_items"))
    ]
    task["completion_history"] = [
        _completion_from_blob(blob)
        for blob in _load_blob(row.get("completion_history"))
    ]
    task["forward_history"] = [
        _forward_from_blob(blob) for blob in _load_blob(row.get("forward_history"))
    ]
    task["concluded_at"] = time.datetime_from_str_optional(row.get("concluded_at"))
    task["created"] = time.datetime_from_str(row["created_at"])
    task["updated"] = time.datetime_from_str(row["updated_at"])
    return cast(Task, task)
