# SPDX-License-Identifier: MIT

from taskledger.model.id_map import IdMap


def get_id_map_template() -> IdMap:
    return {
        "tasks": {"synthetic_to_real": {}, "real_to_synthetic": {}},
        "reconciliations": {"synthetic_to_real": {}, "real_to_synthetic": {}},
    }
