# SPDX-License-Identifier: MIT

import uuid

# Tasks, sub items and reconciliation records are all keyed by a uuid4 string
type EntityId = str


def generate_entity_id() -> EntityId:
    return str(uuid.uuid4())
