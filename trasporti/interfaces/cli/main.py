"""
Trasporti management CLI.
Entry point for every command under ``commands/``.
"""

import argparse
import importlib
import pkgutil
import sys
from typing import Any, Dict, List, Optional

from . import commands as commands_package


class CLIManager:
    def __init__(self):
        self.available_commands = self._discover_commands()

    def _discover_commands(self) -> Dict[str, Any]:
        """Discover the commands available in the commands package"""
        commands = {}

        for module_info in pkgutil.iter_modules(commands_package.__path__):
            module_name = module_info.name
            if module_name.startswith("_") or module_name == "base":
                continue

            module = importlib.import_module(f"{commands_package.__name__}.{module_name}")
            if hasattr(module, "Command"):
                commands[module_name] = module.Command

        return commands

    def list_commands(self):
        """Show every available command"""
        print("Available commands:")
        print("=" * 40)

        if not self.available_commands:
            print("No commands found.")
            return

        for name, command_class in sorted(self.available_commands.items()):
            description = getattr(command_class, "description", "No description")
            print(f"  {name:<20} {description}")

    def run_command(self, command_name: str, args: List[str]):
        """Run one command"""
        if command_name not in self.available_commands:
            print(f"Unknown command: {command_name}")
            print("Use 'trasporti help' to see available commands.")
            sys.exit(1)

        command_instance = self.available_commands[command_name]()

        try:
            command_instance.run(args)
        except Exception as e:
            print(f"Error running command '{command_name}': {e}")
            sys.exit(1)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Trasporti management CLI",
        add_help=False
    )

    parser.add_argument('command', nargs='?', help='Command to run')
    # everything after the command name, options included, goes to the command
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Arguments for the command')

    args = parser.parse_args(argv)
    all_args = args.args

    cli_manager = CLIManager()

    if not args.command or args.command == 'help':
        if len(all_args) > 0:
            command_name = all_args[0]
            if command_name in cli_manager.available_commands:
                cli_manager.available_commands[command_name]().help()
            else:
                print(f"Unknown command: {command_name}")
        else:
            print("Trasporti management CLI")
            print("Usage: trasporti <command> [args...]")
            print()
            cli_manager.list_commands()
            print()
            print("Use 'trasporti help <command>' for help on a specific command.")
        return

    cli_manager.run_command(args.command, all_args)


if __name__ == "__main__":
    main()
