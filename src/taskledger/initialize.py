# SPDX-License-Identifier: MIT

import logging

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from taskledger import configuration
from taskledger import state as app_state
from taskledger.logging_setup import setup_logging
from taskledger.model.id_map import IdMap
from taskledger.repository.configuration import (
    CONFIGURATION_REPO,
    get_default_configuration,
)
from taskledger.template.id_map import get_id_map_template
from taskledger.view import state as view_state

logger = logging.getLogger(__name__)


def initialize() -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    __ensure_config_files()

    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)
    __ensure_data_files()

    config = CONFIGURATION_REPO.get_config()
    setup_logging(
        console_level=config.get("log_level", "WARNING"),
        log_file=configuration.DATA_LOG_PATH,
    )
    view_state.set_show_header(config["show_header"])
    app_state.set_clear_ids(config["clear_ids_on_view"])
    app_state.set_timezone(config["timezone"])
    logger.debug("initialized with data path %s", configuration.DATA_PATH)


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        config = get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))


def __ensure_data_files() -> None:
    if not configuration.DATA_ID_MAP_PATH.is_file():
        id_map: IdMap = get_id_map_template()
        configuration.DATA_ID_MAP_PATH.write_text(dump(dict(id_map), Dumper=Dumper))

    # Directory-based entity stores (one file per entity)
    if not configuration.DATA_TASKS_DIR.is_dir():
        configuration.DATA_TASKS_DIR.mkdir(parents=True, exist_ok=True)
    if not configuration.DATA_RECONCILIATIONS_DIR.is_dir():
        configuration.DATA_RECONCILIATIONS_DIR.mkdir(parents=True, exist_ok=True)
