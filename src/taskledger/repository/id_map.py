# SPDX-License-Identifier: MIT

from typing import Optional, cast, get_args

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskledger import configuration
from taskledger.model.entity_id import EntityId
from taskledger.model.id_map import EntityType, IdMap, IdMapDict, IdMapMapping
from taskledger.template.id_map import get_id_map_template

ENTITY_TYPES = get_args(EntityType)


class IdMapRepository:
    def __init__(self) -> None:
        self._id_map: Optional[IdMap] = None
        self.is_dirty = False

    @property
    def id_map(self) -> IdMap:
        if self._id_map is None:
            self.__load_data()
        if self._id_map is None:
            raise ValueError()
        return self._id_map

    def __load_data(self) -> None:
        if configuration.DATA_ID_MAP_PATH.is_file():
            self._id_map = load(
                configuration.DATA_ID_MAP_PATH.read_text(), Loader=Loader
            )
        if self._id_map is None:
            self._id_map = get_id_map_template()

    def __save_data(self, id_map: IdMap) -> None:
        configuration.DATA_ID_MAP_PATH.write_text(dump(dict(id_map), Dumper=Dumper))

    def flush(self) -> bool:
        if self._id_map is not None and self.is_dirty:
            self.__save_data(self._id_map)
            self.is_dirty = False
            return True
        return False

    def clear_ids(self) -> None:
        self.is_dirty = True
        self._id_map = get_id_map_template()

    def associate_id(self, entity_type: str, entity_id: EntityId) -> int:
        """
        Return the short id for an entity, creating one if needed
        """
        id_map_dict = self.__mapping(entity_type)
        if entity_id in id_map_dict["real_to_synthetic"]:
            return id_map_dict["real_to_synthetic"][entity_id]

        self.is_dirty = True
        next_id = len(id_map_dict["real_to_synthetic"]) + 1
        id_map_dict["real_to_synthetic"][entity_id] = next_id
        id_map_dict["synthetic_to_real"][next_id] = entity_id
        return next_id

    def get_real_id(self, entity_type: str, synthetic_id: int) -> EntityId:
        """
        Get the entity id associated with a short id
        """
        id_map_dict = self.__mapping(entity_type)
        if synthetic_id not in id_map_dict["synthetic_to_real"]:
            raise KeyError(f"no {entity_type} entry with id {synthetic_id}")
        return id_map_dict["synthetic_to_real"][synthetic_id]

    def __mapping(self, entity_type: str) -> IdMapMapping:
        if entity_type not in ENTITY_TYPES:
            raise TypeError(
                f"{IdMapRepository.associate_id.__name__}: expected {EntityType} literals"
            )
        return cast(IdMapDict, self.id_map)[cast(EntityType, entity_type)]


ID_MAP_REPO = IdMapRepository()
