"""Property store implementations."""

import logging

from ..config import StoreConfig
from ..interfaces import IPropertyStore
from .memory_store import InMemoryPropertyStore
from .sqlite_store import SQLitePropertyStore
from .yaml_store import YamlPropertyStore

__all__ = [
    "InMemoryPropertyStore",
    "SQLitePropertyStore",
    "YamlPropertyStore",
    "create_property_store",
]


def create_property_store(config: StoreConfig) -> IPropertyStore:
    """Create the property store described by config.

    Raises:
        ValueError: If the configuration is invalid.
    """
    logger = logging.getLogger(__name__)

    errors = config.validate()
    if errors:
        raise ValueError(f"Configuration errors: {errors}")

    if config.provider == "memory":
        logger.warning(
            "Using in-memory property store. "
            "Settings will NOT persist across restarts."
        )
        return InMemoryPropertyStore()
    elif config.provider == "sqlite":
        return SQLitePropertyStore(config.path, table_name=config.table_name)
    else:
        return YamlPropertyStore(config.path)
