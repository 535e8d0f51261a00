"""
Base class for every CLI command
"""

import argparse
import sys
from abc import ABC, abstractmethod
from typing import List, NoReturn

COLORS = {"success": ("92", "✓"), "error": ("91", "✗"), "warning": ("93", "⚠"), "info": ("94", "ℹ")}


class BaseCommand(ABC):
    """
    A command module exposes a ``Command`` subclass; its file name is the
    command name on the command line.
    """

    description = "No description provided"

    def __init__(self):
        self.parser = argparse.ArgumentParser(description=self.description, add_help=False)
        self.add_arguments(self.parser)

    def add_arguments(self, parser: argparse.ArgumentParser):
        """Override to declare command arguments"""
        pass

    @abstractmethod
    def handle(self, **options):
        pass

    def run(self, args: List[str]):
        options = self.parser.parse_args(args)
        self.handle(**vars(options))

    def help(self):
        self.parser.print_help()

    def fail(self, message: str) -> NoReturn:
        """Report a fatal error and exit with status 1"""
        self._print("error", message)
        sys.exit(1)

    def _print(self, kind: str, message: str):
        color, symbol = COLORS[kind]
        print(f"\033[{color}m{symbol} {message}\033[0m")

    def print_success(self, message: str):
        self._print("success", message)

    def print_warning(self, message: str):
        self._print("warning", message)

    def print_info(self, message: str):
        self._print("info", message)
