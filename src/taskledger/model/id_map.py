# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

from taskledger.model.entity_id import EntityId

EntityType = Literal["tasks", "reconciliations"]


type IdMapDict = dict[EntityType, IdMapMapping]


class IdMap(TypedDict):
    """
    Short numeric ids shown on the command line, mapped to real entity ids.

    Example:

    Task with an id of "5f0c...".
    Synthetic id for that task is 7.

    real_task_id = id_map["tasks"]["synthetic_to_real"][7]
    """

    tasks: "IdMapMapping"
    reconciliations: "IdMapMapping"


class IdMapMapping(TypedDict):
    synthetic_to_real: dict[int, EntityId]
    real_to_synthetic: dict[EntityId, int]
