# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskledger import configuration, time
from taskledger.errors import ReconciliationNotFoundError
from taskledger.model.entity_id import EntityId, generate_entity_id
from taskledger.model.reconciliation import ReconciliationRecord


class ReconciliationRepository:
    """
    Append-mostly ledger of half-applied reschedules awaiting repair.

    Writes are buffered and written out by ``flush``.
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self._data_dir = data_dir
        self._records: Optional[list[ReconciliationRecord]] = None
        self.is_dirty = False
        self._dirty_ids: set[str] = set()

    @property
    def data_dir(self) -> Path:
        if self._data_dir is not None:
            return self._data_dir
        return configuration.DATA_RECONCILIATIONS_DIR

    @property
    def records(self) -> list[ReconciliationRecord]:
        if self._records is None:
            self.__load_data()
        if self._records is None:
            raise ValueError()
        return self._records

    def __load_data(self) -> None:
        self._records = []
        if not self.data_dir.is_dir():
            return
        for file_path in self.data_dir.iterdir():
            if file_path.suffix != ".yaml" or file_path.name == ".gitkeep":
                continue
            raw_record = load(file_path.read_text(), Loader=Loader)
            if raw_record is not None:
                self._records.append(
                    self.__convert_record_for_deserialization(raw_record)
                )
        self._records.sort(key=lambda record: record["created"])

    def __save_data(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for record in self.records:
            if record["id"] in self._dirty_ids:
                serializable_record = self.__convert_record_for_serialization(
                    deepcopy(record)
                )
                file_path = self.data_dir / f"{record['id']}.yaml"
                file_path.write_text(dump(serializable_record, Dumper=Dumper))
        self._dirty_ids.clear()

    def flush(self) -> bool:
        if self._records is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __convert_record_for_serialization(
        self, record: ReconciliationRecord
    ) -> dict[str, Any]:
        serializable_record = cast(dict[str, Any], record)
        serializable_record["created"] = time.datetime_to_iso_str(
            serializable_record["created"]
        )
        serializable_record["resolved"] = time.datetime_to_iso_str_optional(
            serializable_record["resolved"]
        )
        return serializable_record

    def __convert_record_for_deserialization(
        self, record: dict[str, Any]
    ) -> ReconciliationRecord:
        deserializable_record = record
        deserializable_record["created"] = time.datetime_from_str(
            deserializable_record["created"]
        )
        deserializable_record["resolved"] = time.datetime_from_str_optional(
            deserializable_record["resolved"]
        )
        return cast(ReconciliationRecord, deserializable_record)

    def save_new_record(self, record: ReconciliationRecord) -> EntityId:
        self.is_dirty = True

        record["id"] = generate_entity_id()
        self.records.append(record)
        self._dirty_ids.add(record["id"])

        return record["id"]

    def __find(self, id: EntityId) -> ReconciliationRecord:
        for record in self.records:
            if record["id"] == id:
                return record
        raise ReconciliationNotFoundError(id)

    def resolve_record(self, id: EntityId) -> None:
        record = self.__find(id)

        self.is_dirty = True
        self._dirty_ids.add(id)
        record["resolved"] = time.now_utc()

    def has_open_record(self, task_id: EntityId, kind: str) -> bool:
        return any(
            record["task_id"] == task_id
            and record["kind"] == kind
            and record["resolved"] is None
            for record in self.records
        )

    def get_all_records(self) -> list[ReconciliationRecord]:
        return deepcopy(self.records)

    def get_open_records(self) -> list[ReconciliationRecord]:
        return deepcopy([record for record in self.records if record["resolved"] is None])

    def get_record(self, id: EntityId) -> ReconciliationRecord:
        return deepcopy(self.__find(id))


RECONCILIATION_REPO = ReconciliationRepository()
