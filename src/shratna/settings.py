"""Typed setting descriptors and the table of ATNA settings.

Each setting pairs a property name with a default value and the
parser/formatter used to move the value to and from its stored text.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar('T')

# Property names as they appear in the property store
KEY_STORE_PROPERTY = "shr-atna.security.keyStore"
KEY_STORE_PASSWORD_PROPERTY = "shr-atna.security.keyStorePassword"
TRUST_STORE_PROPERTY = "shr-atna.security.trustStore"
TRUST_STORE_PASSWORD_PROPERTY = "shr-atna.security.trustStorePassword"
SHR_ROOT_PROPERTY = "shr.id.root"
EPID_ROOT_PROPERTY = "shr.id.epidRoot"
ECID_ROOT_PROPERTY = "shr.id.ecidRoot"
AR_ENDPOINT_PROPERTY = "shr-atna.auditRepository.endpoint"
AR_TRANSPORT_PROPERTY = "shr-atna.auditRepository.transport"
AR_PORT_PROPERTY = "shr-atna.auditRepository.port"
LOCAL_BIND_ADDR_PROPERTY = "shr-atna.auditRepository.localBindAddr"
DEVICE_NAME_PROPERTY = "shr-atna.deviceName"


class ConversionError(ValueError):
    """Stored text could not be converted to the setting's type."""

    def __init__(self, name: str, raw_value: str, target_type: type):
        self.name = name
        self.raw_value = raw_value
        self.target_type = target_type
        super().__init__(
            f"Cannot convert property {name}={raw_value!r} "
            f"to {target_type.__name__}"
        )


def _parse_bool(raw: str) -> bool:
    val = raw.strip().lower()
    if val in ("true", "1", "yes"):
        return True
    if val in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class Setting(Generic[T]):
    """A named, typed configuration value with a fixed default.

    Attributes:
        name: Property name in the store
        default: Value returned (and persisted) when the property is unset
        value_type: Python type the stored text converts to
        parse: Text -> value conversion; raises ValueError on bad input
        format: Value -> text conversion used when persisting the default
        secret: Whether the value should be masked when displayed
    """
    name: str
    default: T
    value_type: type
    parse: Callable[[str], T]
    format: Callable[[T], str] = str
    secret: bool = False

    def coerce(self, raw: str) -> T:
        """Convert stored text to the setting's type.

        Raises:
            ConversionError: If the text is not a valid value.
        """
        try:
            return self.parse(raw)
        except (ValueError, TypeError) as e:
            raise ConversionError(self.name, raw, self.value_type) from e

    def __repr__(self) -> str:
        return f"Setting(name={self.name!r}, type={self.value_type.__name__})"


def text_setting(name: str, default: str = "", secret: bool = False) -> Setting[str]:
    return Setting(name=name, default=default, value_type=str, parse=str, secret=secret)


def int_setting(name: str, default: int) -> Setting[int]:
    return Setting(name=name, default=default, value_type=int, parse=int)


def setting_for_default(name: str, default: Any) -> Setting:
    """Build an ad-hoc setting whose type follows the default's type.

    Raises:
        TypeError: If the default's type has no known text conversion.
    """
    # bool before int: bool is an int subclass
    if isinstance(default, bool):
        return Setting(name=name, default=default, value_type=bool,
                       parse=_parse_bool, format=_format_bool)
    if isinstance(default, int):
        return int_setting(name, default)
    if isinstance(default, float):
        return Setting(name=name, default=default, value_type=float, parse=float)
    if isinstance(default, str):
        return text_setting(name, default)
    raise TypeError(
        f"Unsupported default type for {name}: {type(default).__name__}"
    )


KEY_STORE_FILE = text_setting(KEY_STORE_PROPERTY)
KEY_STORE_PASSWORD = text_setting(KEY_STORE_PASSWORD_PROPERTY, secret=True)
TRUST_STORE_FILE = text_setting(TRUST_STORE_PROPERTY)
TRUST_STORE_PASSWORD = text_setting(TRUST_STORE_PASSWORD_PROPERTY, secret=True)
LOCAL_BIND_ADDRESS = text_setting(LOCAL_BIND_ADDR_PROPERTY, "127.0.0.1")
DEVICE_NAME = text_setting(DEVICE_NAME_PROPERTY, "OpenSHRInstance")
SHR_ROOT = text_setting(SHR_ROOT_PROPERTY, "1.2.3.4.5.6")
ECID_ROOT = text_setting(ECID_ROOT_PROPERTY)
EPID_ROOT = text_setting(EPID_ROOT_PROPERTY)
AUDIT_REPOSITORY_ENDPOINT = text_setting(AR_ENDPOINT_PROPERTY, "127.0.0.1")
AUDIT_REPOSITORY_TRANSPORT = text_setting(AR_TRANSPORT_PROPERTY, "audit-udp")
AUDIT_REPOSITORY_PORT = int_setting(AR_PORT_PROPERTY, 514)

SETTINGS: tuple[Setting, ...] = (
    KEY_STORE_FILE,
    KEY_STORE_PASSWORD,
    TRUST_STORE_FILE,
    TRUST_STORE_PASSWORD,
    LOCAL_BIND_ADDRESS,
    DEVICE_NAME,
    SHR_ROOT,
    ECID_ROOT,
    EPID_ROOT,
    AUDIT_REPOSITORY_ENDPOINT,
    AUDIT_REPOSITORY_TRANSPORT,
    AUDIT_REPOSITORY_PORT,
)

SETTINGS_BY_NAME: dict[str, Setting] = {s.name: s for s in SETTINGS}

# Identifier roots derived from the SHR root: name -> suffix
DERIVED_ROOTS: dict[str, str] = {
    "visit": "1",
    "encounter": "2",
    "obs": "3",
    "order": "4",
    "problem": "5",
    "allergy": "6",
    "provider": "7",
    "location": "8",
    "patient": "9",
    "user": "10",
}


def derive_root(shr_root: str, suffix: str) -> str:
    """Append a child arc to an identifier root."""
    return f"{shr_root}.{suffix}"
