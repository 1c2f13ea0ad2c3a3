# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskledger import configuration
from taskledger.model.entity_id import generate_entity_id


def get_default_configuration() -> configuration.Configuration:
    return {
        "owner_id": generate_entity_id(),
        "data_path": None,
        "timezone": "local",
        "show_header": True,
        "clear_ids_on_view": True,
        "log_level": "WARNING",
        "keep_order_on_reschedule": True,
        "keep_checklist_on_reschedule": True,
        "compensate_failed_reschedule": True,
    }


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        self._config = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        if self._config is None:
            raise ValueError()

        # Fill in settings added after the config file was written
        for key, value in get_default_configuration().items():
            if key not in self._config:
                self._config[key] = value  # type: ignore[literal-required]
                self.is_dirty = True

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        timezone: Optional[str] = None,
        show_header: Optional[bool] = None,
        clear_ids_on_view: Optional[bool] = None,
        log_level: Optional[str] = None,
        keep_order_on_reschedule: Optional[bool] = None,
        keep_checklist_on_reschedule: Optional[bool] = None,
        compensate_failed_reschedule: Optional[bool] = None,
    ) -> None:
        self.is_dirty = True

        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if timezone is not None:
            self.config["timezone"] = timezone
        if show_header is not None:
            self.config["show_header"] = show_header
        if clear_ids_on_view is not None:
            self.config["clear_ids_on_view"] = clear_ids_on_view
        if log_level is not None:
            self.config["log_level"] = log_level
        if keep_order_on_reschedule is not None:
            self.config["keep_order_on_reschedule"] = keep_order_on_reschedule
        if keep_checklist_on_reschedule is not None:
            self.config["keep_checklist_on_reschedule"] = keep_checklist_on_reschedule
        if compensate_failed_reschedule is not None:
            self.config["compensate_failed_reschedule"] = compensate_failed_reschedule


CONFIGURATION_REPO = ConfigurationRepository()
