"""SHR ATNA configuration.

Get-or-create access to the audit-trail settings of a Shared Health Record
instance, backed by a pluggable property store.
"""

from .configuration import AtnaConfiguration
from .interfaces import IPropertyStore
from .settings import EPID_ROOT_PROPERTY, ConversionError, Setting

__version__ = "0.1.0"

__all__ = [
    "AtnaConfiguration",
    "ConversionError",
    "EPID_ROOT_PROPERTY",
    "IPropertyStore",
    "Setting",
]
