from .config import Config, ConfigFactory
from .inject import (
    ConfigProvider,
    ConfigStore,
    ConfigValue,
    MockConfigProvider,
    get_config_provider,
    reset_config_provider,
    set_config_provider,
)
from .setup import close_connection, get_connection, open_connection, setup_config_store
