"""
Module Registry CLI

Command-line interface for inspecting the application's module registry.
Builds a registry from the environment's feature flags, registers the module
catalog, and reports on it.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from feature_flags.provider import EnvironmentFlagProvider
from module_registry.catalog import get_module_status, register_modules
from module_registry.config import get_registry_settings
from module_registry.module_registry import ModuleRegistry

logger = logging.getLogger(__name__)


class RegistryCLI:
    """Command-line interface for the module registry."""

    def __init__(self, registry: Optional[ModuleRegistry] = None):
        if registry is None:
            settings = get_registry_settings()
            registry = ModuleRegistry(
                EnvironmentFlagProvider(),
                health_check_interval=settings.health_check_interval,
            )
        self.registry = registry
        self.flags = registry.feature_flags

    def initialize(self):
        """Register the application modules."""
        register_modules(self.registry)

    def list_modules(self):
        """List all registered modules."""
        modules = self.registry.get_all_modules()

        if not modules:
            print("No modules registered.")
            return

        print("\nRegistered Modules:")
        print("-" * 80)
        print(f"{'Name':<26} {'Version':<10} {'Category':<14} {'Status':<10} {'Enabled':<8}")
        print("-" * 80)

        for entry in modules:
            print(f"{entry.name:<26} {entry.config.version:<10} {entry.config.category or '-':<14} "
                  f"{entry.status.value:<10} {'Yes' if entry.is_active else 'No':<8}")

        print("-" * 80)

    def show_module_info(self, module_name: str):
        """Show detailed information about a module."""
        info = self.registry.get_module_info(module_name)

        if not info:
            print(f"Module '{module_name}' not found.")
            return

        print(f"\nModule Information: {module_name}")
        print("=" * 50)
        print(f"Name: {info['name']}")
        print(f"Description: {info['description']}")
        print(f"Version: {info['version']}")
        print(f"Category: {info['category'] or 'None'}")
        print(f"Status: {info['status']}")
        print(f"Enabled: {'Yes' if info['enabled'] else 'No'}")
        print(f"Health: {info['health'] or 'Unknown'}")
        print(f"Dependencies: {', '.join(info['dependencies']) if info['dependencies'] else 'None'}")
        print(f"Dependents: {', '.join(info['dependents']) if info['dependents'] else 'None'}")
        print(f"Required Features: {', '.join(info['required_features']) or 'None'}")
        print(f"Optional Features: {', '.join(info['optional_features']) or 'None'}")

        if info['last_error']:
            print(f"\nLast Error: {info['last_error']}")

    def enable_module(self, module_name: str):
        if self.registry.enable(module_name):
            print(f"Module '{module_name}' enabled.")
        else:
            print(f"Failed to enable module '{module_name}'. Check that it exists, its dependencies are enabled "
                  f"and its required features are on.")

    def disable_module(self, module_name: str):
        if self.registry.disable(module_name):
            print(f"Module '{module_name}' disabled.")
        else:
            dependents = [d for d in self.registry.get_dependents(module_name)
                          if self.registry.get_module_info(d)['enabled']]
            if dependents:
                print(f"Cannot disable '{module_name}': enabled modules {', '.join(dependents)} depend on it.")
            else:
                print(f"Failed to disable module '{module_name}'. Module may not exist.")

    def show_status(self):
        """Show overall registry status."""
        status = get_module_status(self.registry)
        stats = status['statistics']

        print("\nRegistry Status")
        print("=" * 50)
        print(f"Total Modules: {stats['total']}")
        print(f"Enabled: {stats['enabled']}  Disabled: {stats['disabled']}  Errors: {stats['errors']}")

        if status['enabled_modules']:
            print(f"\nEnabled Modules: {', '.join(status['enabled_modules'])}")
        if status['disabled_modules']:
            print(f"Disabled Modules: {', '.join(status['disabled_modules'])}")
        if status['error_modules']:
            print(f"Error Modules: {', '.join(status['error_modules'])}")

    def show_statistics(self):
        print(json.dumps(self.registry.get_statistics().to_dict(), indent=2))

    async def show_health(self):
        results = await self.registry.perform_health_check()

        print("\nHealth Check")
        print("-" * 60)
        for name, health in results.items():
            detail = health.details.get('error') or health.details.get('warning') or ''
            print(f"{name:<26} {health.status.value:<10} {detail}")
        print("-" * 60)

    def show_load_order(self):
        for position, name in enumerate(self.registry.get_load_order(), start=1):
            print(f"{position:>3}. {name}")

    def show_flags(self):
        print("\nFeature Flags")
        print("-" * 50)
        get_all_flags = getattr(self.flags, 'get_all_flags', dict)
        for name, value in sorted(get_all_flags().items()):
            print(f"{name:<30} {'on' if value else 'off'}")

        # Only environment-backed providers know about misconfigurations
        validate = getattr(self.flags, 'validate', None)
        warnings = validate() if validate else []
        if warnings:
            print("\nConfiguration warnings:")
            for warning in warnings:
                print(f"  - {warning}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Inspect the application module registry')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('list', help='List all modules')

    info_parser = subparsers.add_parser('info', help='Show module information')
    info_parser.add_argument('module', help='Module name')

    enable_parser = subparsers.add_parser('enable', help='Enable a module')
    enable_parser.add_argument('module', help='Module name')

    disable_parser = subparsers.add_parser('disable', help='Disable a module')
    disable_parser.add_argument('module', help='Module name')

    subparsers.add_parser('status', help='Show registry status')
    subparsers.add_parser('stats', help='Show registry statistics as JSON')
    subparsers.add_parser('health', help='Run a health check over enabled modules')
    subparsers.add_parser('order', help='Show dependency load order')
    subparsers.add_parser('flags', help='Show feature flag values')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    load_dotenv()
    settings = get_registry_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cli = RegistryCLI()

    try:
        cli.initialize()

        if args.command == 'list':
            cli.list_modules()
        elif args.command == 'info':
            cli.show_module_info(args.module)
        elif args.command == 'enable':
            cli.enable_module(args.module)
        elif args.command == 'disable':
            cli.disable_module(args.module)
        elif args.command == 'status':
            cli.show_status()
        elif args.command == 'stats':
            cli.show_statistics()
        elif args.command == 'health':
            asyncio.run(cli.show_health())
        elif args.command == 'order':
            cli.show_load_order()
        elif args.command == 'flags':
            cli.show_flags()
    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
