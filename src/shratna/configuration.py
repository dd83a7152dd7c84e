"""ATNA configuration provider.

Single access point for the audit-trail (ATNA) settings of a Shared Health
Record instance. Every value lives in a property store; when a property is
unset the default is returned and written back, so the first lookup seeds
the store with an editable value.

Usage:
    config = AtnaConfiguration.get_instance()
    host = config.get_audit_repository_endpoint()
    port = config.get_audit_repository_port()

    # Or with an explicit store
    config = AtnaConfiguration(SQLitePropertyStore("/var/lib/shr/props.db"))
"""

import logging
import threading
from typing import Any, ClassVar, Optional, TypeVar

from .interfaces import IPropertyStore
from .settings import (
    AUDIT_REPOSITORY_ENDPOINT,
    AUDIT_REPOSITORY_PORT,
    AUDIT_REPOSITORY_TRANSPORT,
    DERIVED_ROOTS,
    DEVICE_NAME,
    ECID_ROOT,
    EPID_ROOT,
    KEY_STORE_FILE,
    KEY_STORE_PASSWORD,
    LOCAL_BIND_ADDRESS,
    SETTINGS,
    SHR_ROOT,
    TRUST_STORE_FILE,
    TRUST_STORE_PASSWORD,
    Setting,
    derive_root,
    setting_for_default,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class AtnaConfiguration:
    """Typed accessors over a get-or-create property store.

    Values are never cached: each accessor re-reads the store, so external
    edits and derived identifier roots are always current.
    """

    _instance: ClassVar[Optional["AtnaConfiguration"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()
    _default_store: ClassVar[Optional[IPropertyStore]] = None

    def __init__(self, store: Optional[IPropertyStore] = None):
        """Create a configuration provider.

        Args:
            store: Backing property store. When omitted, the store is
                resolved on first use from set_default_store() or from
                StoreConfig.from_env().
        """
        self._store = store
        self._store_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "AtnaConfiguration":
        """Get the process-wide configuration, creating it on first call."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
                    logger.info("Created shared ATNA configuration")
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the shared instance and any registered default store.

        The store itself is not closed; its owner is responsible for that.
        """
        with cls._instance_lock:
            cls._instance = None
            cls._default_store = None

    @classmethod
    def set_default_store(cls, store: IPropertyStore) -> None:
        """Register the store used by instances created without one.

        Must be called before the shared instance first touches its store;
        afterwards it only affects instances created later.
        """
        with cls._instance_lock:
            cls._default_store = store
            if cls._instance is not None and cls._instance._store is not None:
                logger.warning(
                    "Shared ATNA configuration already uses "
                    f"{cls._instance._store!r}; default store change ignored "
                    "until reset_instance()"
                )

    @property
    def store(self) -> IPropertyStore:
        """The backing property store, resolved lazily."""
        if self._store is None:
            with self._store_lock:
                if self._store is None:
                    self._store = self._resolve_store()
        return self._store

    def _resolve_store(self) -> IPropertyStore:
        if self._default_store is not None:
            return self._default_store

        from .config import StoreConfig
        from .services import create_property_store

        config = StoreConfig.from_env()
        logger.info(f"Using {config.provider} property store ({config.path})")
        return create_property_store(config)

    def get(self, setting: Setting[T]) -> T:
        """Read a setting, seeding the store with its default if unset.

        Raises:
            ConversionError: If the stored text is not a valid value.
        """
        raw = self.store.read(setting.name)
        if raw:
            return setting.coerce(raw)

        self.store.write(setting.name, setting.format(setting.default))
        logger.debug(f"Seeded property {setting.name} with its default")
        return setting.default

    def get_or_create(self, name: str, default: Any) -> Any:
        """Read a property, converting it to the type of default.

        If the property is absent or empty, default is written to the store
        and returned unchanged.

        Raises:
            ConversionError: If the stored text does not parse as the
                default's type.
            TypeError: If the default's type is not supported.
        """
        return self.get(setting_for_default(name, default))

    def get_key_store_file(self) -> str:
        return self.get(KEY_STORE_FILE)

    def get_key_store_password(self) -> str:
        return self.get(KEY_STORE_PASSWORD)

    def get_trust_store_file(self) -> str:
        return self.get(TRUST_STORE_FILE)

    def get_trust_store_password(self) -> str:
        return self.get(TRUST_STORE_PASSWORD)

    def get_local_bind_address(self) -> str:
        """Local address the audit sender binds to."""
        return self.get(LOCAL_BIND_ADDRESS)

    def get_device_name(self) -> str:
        return self.get(DEVICE_NAME)

    def get_shr_root(self) -> str:
        """Canonical identifier root all other SHR roots derive from."""
        return self.get(SHR_ROOT)

    def get_ecid_root(self) -> str:
        """Enterprise (external community) identifier root."""
        return self.get(ECID_ROOT)

    def get_epid_root(self) -> str:
        """External patient identifier root."""
        return self.get(EPID_ROOT)

    def get_audit_repository_endpoint(self) -> str:
        return self.get(AUDIT_REPOSITORY_ENDPOINT)

    def get_audit_repository_transport(self) -> str:
        return self.get(AUDIT_REPOSITORY_TRANSPORT)

    def get_audit_repository_port(self) -> int:
        return self.get(AUDIT_REPOSITORY_PORT)

    def _derived_root(self, kind: str) -> str:
        return derive_root(self.get_shr_root(), DERIVED_ROOTS[kind])

    def get_visit_root(self) -> str:
        return self._derived_root("visit")

    def get_encounter_root(self) -> str:
        return self._derived_root("encounter")

    def get_obs_root(self) -> str:
        """Root for observations."""
        return self._derived_root("obs")

    def get_order_root(self) -> str:
        return self._derived_root("order")

    def get_problem_root(self) -> str:
        return self._derived_root("problem")

    def get_allergy_root(self) -> str:
        return self._derived_root("allergy")

    def get_provider_root(self) -> str:
        return self._derived_root("provider")

    def get_location_root(self) -> str:
        return self._derived_root("location")

    def get_patient_root(self) -> str:
        return self._derived_root("patient")

    def get_user_root(self) -> str:
        return self._derived_root("user")

    def identifier_roots(self) -> dict[str, str]:
        """All derived identifier roots, from a single read of the SHR root."""
        shr_root = self.get_shr_root()
        return {
            kind: derive_root(shr_root, suffix)
            for kind, suffix in DERIVED_ROOTS.items()
        }

    def snapshot(self) -> dict[str, Any]:
        """Current value of every known setting, keyed by property name.

        Unset properties are seeded with their defaults.
        """
        return {setting.name: self.get(setting) for setting in SETTINGS}

    def __repr__(self) -> str:
        return f"AtnaConfiguration(store={self._store!r})"
