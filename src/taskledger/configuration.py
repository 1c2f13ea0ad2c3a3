# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "taskledger"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_TASKS_DIR: Path = DATA_PATH / "tasks"
DATA_RECONCILIATIONS_DIR: Path = DATA_PATH / "reconciliations"
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"
DATA_LOG_PATH: Path = DATA_PATH / "taskledger.log"


class Configuration(TypedDict):
    owner_id: str
    data_path: Optional[str]
    timezone: str
    show_header: bool
    clear_ids_on_view: bool
    log_level: NotRequired[str]
    keep_order_on_reschedule: NotRequired[bool]
    keep_checklist_on_reschedule: NotRequired[bool]
    compensate_failed_reschedule: NotRequired[bool]


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_TASKS_DIR, DATA_RECONCILIATIONS_DIR, DATA_ID_MAP_PATH
    global DATA_LOG_PATH

    DATA_PATH = data_path
    DATA_TASKS_DIR = DATA_PATH / "tasks"
    DATA_RECONCILIATIONS_DIR = DATA_PATH / "reconciliations"
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"
    DATA_LOG_PATH = DATA_PATH / "taskledger.log"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are instantiated.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Configuration = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    data_path_setting = config.get("data_path")

    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))
