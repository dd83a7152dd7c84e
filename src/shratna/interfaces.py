"""Core interfaces for the SHR ATNA configuration.

The configuration provider never owns its values: it delegates to a
property store that maps property names to text values.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IPropertyStore(ABC):
    """Interface for durable name -> text property storage."""

    @abstractmethod
    def read(self, name: str) -> Optional[str]:
        """Return the stored text for a property, or None if absent."""
        pass

    @abstractmethod
    def write(self, name: str, value: str) -> None:
        """Create or replace a property value."""
        pass

    def names(self) -> list[str]:
        """List stored property names.

        Default implementation returns an empty list. Stores that can
        enumerate their entries should override this.
        """
        return []

    def close(self) -> None:
        """Release any held resources. Safe to call more than once."""
        pass

    def __enter__(self) -> "IPropertyStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None
