"""Property store configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

SHR_ATNA_DIR = Path.home() / ".shr-atna"
CONFIG_FILE = SHR_ATNA_DIR / "config.yaml"

STORE_PROVIDERS = ("memory", "sqlite", "yaml")

_DEFAULT_PATHS = {
    "sqlite": "~/.shr-atna/properties.db",
    "yaml": "~/.shr-atna/properties.yaml",
}


@dataclass
class StoreConfig:
    """Where the configuration properties live.

    Attributes:
        provider: Backing store type: "memory", "sqlite" or "yaml"
        path: Database/file path for file-backed stores. Defaults to a
            file under ~/.shr-atna/ for the chosen provider.
        table_name: Property table name (sqlite only)
        unknown_keys: Unrecognised keys found in the "store" section

    Example config.yaml:
        store:
          provider: sqlite
          path: /var/lib/openshr/properties.db
          table_name: global_property
    """
    provider: str = "sqlite"
    path: Optional[str] = None
    table_name: str = "global_property"
    unknown_keys: list[str] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if self.path is None:
            self.path = _DEFAULT_PATHS.get(self.provider)
        # Expand home directory
        if self.path:
            self.path = str(Path(self.path).expanduser())

    @classmethod
    def from_file(cls, path: str | Path) -> "StoreConfig":
        """Load configuration from a YAML file.

        A missing file yields the defaults.
        """
        path = Path(path).expanduser()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "StoreConfig":
        """Create configuration from a dict with an optional "store" section."""
        store_data = data.get("store") or {}
        if not isinstance(store_data, dict):
            raise ValueError("The \"store\" section must be a mapping")

        return cls(
            provider=store_data.get("provider", "sqlite"),
            path=store_data.get("path"),
            table_name=store_data.get("table_name", "global_property"),
            unknown_keys=sorted(
                str(k) for k in store_data
                if k not in ("provider", "path", "table_name")
            ),
        )

    @classmethod
    def from_env(cls, prefix: str = "SHR_ATNA") -> "StoreConfig":
        """Load configuration from environment variables.

        Environment variables:
            {prefix}_CONFIG: YAML config file (default ~/.shr-atna/config.yaml)
            {prefix}_STORE_PROVIDER: memory|sqlite|yaml
            {prefix}_STORE_PATH: Database/file path
            {prefix}_STORE_TABLE: SQLite table name

        Individual variables override values from the config file.
        """
        def get(key: str, default: str = None) -> Optional[str]:
            return os.environ.get(f"{prefix}_{key}", default)

        base = cls.from_file(get("CONFIG", str(CONFIG_FILE)))

        provider = get("STORE_PROVIDER", base.provider)
        path = get("STORE_PATH")
        if path is None and provider == base.provider:
            path = base.path
        # Otherwise path stays None and resolves to the provider's default

        return cls(
            provider=provider,
            path=path,
            table_name=get("STORE_TABLE", base.table_name),
            unknown_keys=base.unknown_keys,
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.provider not in STORE_PROVIDERS:
            errors.append(
                f"Invalid store provider: {self.provider}. "
                f"Valid options: {', '.join(STORE_PROVIDERS)}"
            )
        elif self.provider != "memory" and not self.path:
            errors.append(f"{self.provider} store requires a path")

        if self.provider == "sqlite" and not self.table_name:
            errors.append("table_name cannot be empty")

        if self.unknown_keys:
            errors.append(
                f"Unknown store option(s): {', '.join(self.unknown_keys)}. "
                f"Valid options: provider, path, table_name"
            )

        return errors
