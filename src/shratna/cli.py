"""SHR ATNA configuration CLI.

Usage:
    shratna show                    # Print every setting (seeds defaults)
    shratna show --reveal           # ... including passwords
    shratna get shr.id.root         # Print one setting
    shratna roots                   # Print derived identifier roots
    shratna set shr.id.root 1.3.6   # Edit a setting in the store
    shratna -c config.yaml show     # Use a specific store config
"""

import argparse
import logging
import sys

from .config import StoreConfig
from .configuration import AtnaConfiguration
from .interfaces import IPropertyStore
from .services import create_property_store
from .settings import SETTINGS, SETTINGS_BY_NAME, ConversionError

MASK = "********"


def _open_store(args: argparse.Namespace) -> IPropertyStore:
    if args.config:
        config = StoreConfig.from_file(args.config)
    else:
        config = StoreConfig.from_env()
    return create_property_store(config)


def cmd_show(args: argparse.Namespace) -> int:
    """Print all settings as name = value."""
    with _open_store(args) as store:
        config = AtnaConfiguration(store)
        try:
            for setting in SETTINGS:
                value = config.get(setting)
                if setting.secret and value and not args.reveal:
                    value = MASK
                print(f"{setting.name} = {value}")
        except ConversionError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Print a single setting by property name."""
    setting = SETTINGS_BY_NAME.get(args.name)
    if setting is None:
        print(f"❌ Unknown setting: {args.name}", file=sys.stderr)
        return 1

    with _open_store(args) as store:
        try:
            value = AtnaConfiguration(store).get(setting)
        except ConversionError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
    print(value)
    return 0


def cmd_roots(args: argparse.Namespace) -> int:
    """Print the identifier roots derived from the SHR root."""
    with _open_store(args) as store:
        roots = AtnaConfiguration(store).identifier_roots()
    for kind, root in roots.items():
        print(f"{kind:<10} {root}")
    return 0


def cmd_set(args: argparse.Namespace) -> int:
    """Write a setting value directly to the store."""
    setting = SETTINGS_BY_NAME.get(args.name)
    if setting is None:
        print(f"❌ Unknown setting: {args.name}", file=sys.stderr)
        return 1

    try:
        value = setting.coerce(args.value)
    except ConversionError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    with _open_store(args) as store:
        store.write(setting.name, setting.format(value))
    print(f"✅ {setting.name} updated")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shratna",
        description="Inspect and edit SHR ATNA audit settings",
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Store config YAML (default: $SHR_ATNA_CONFIG "
                             "or ~/.shr-atna/config.yaml)")
    parser.add_argument("--log-level", type=str, default="warning",
                        choices=["debug", "info", "warning", "error"])
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", help="Print every setting")
    show_parser.add_argument("--reveal", action="store_true",
                             help="Show passwords instead of masking them")

    get_parser = subparsers.add_parser("get", help="Print one setting")
    get_parser.add_argument("name", help="Property name, e.g. shr.id.root")

    subparsers.add_parser("roots", help="Print derived identifier roots")

    set_parser = subparsers.add_parser("set", help="Write a setting to the store")
    set_parser.add_argument("name", help="Property name")
    set_parser.add_argument("value", help="New value")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "show": cmd_show,
        "get": cmd_get,
        "roots": cmd_roots,
        "set": cmd_set,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(handler(args))
    except ValueError as e:
        # Invalid store configuration
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
