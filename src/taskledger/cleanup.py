# SPDX-License-Identifier: MIT

import atexit

from taskledger.repository.configuration import CONFIGURATION_REPO
from taskledger.repository.id_map import ID_MAP_REPO
from taskledger.repository.reconciliation import RECONCILIATION_REPO


def flush() -> None:
    CONFIGURATION_REPO.flush()
    ID_MAP_REPO.flush()
    RECONCILIATION_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
