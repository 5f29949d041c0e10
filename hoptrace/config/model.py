"""
Handles configuration of the application via command-line parameters and provides this information grouped by
concern.
"""
from enum import Enum
from typing import Type, TypeVar, Optional, List

from .args import parser
from .. import logsetup
from ..model import const

T = TypeVar('T', bound=Enum)


def _convert_enum(kind: Type[T], key: str) -> T:
    # Validation should be done by choices= passed to argparse
    clean_key = key.upper().replace('-', '_')
    return kind[clean_key]


class ProbeConfig:
    def __init__(self, args):
        self.packet_size: int = args.packet_size
        self.first_ttl: int = args.first_ttl
        self.max_ttl: int = args.max_ttl
        self.base_port: int = args.port
        self.wait: float = args.wait
        self.probes: int = args.nqueries
        self.strict: bool = args.strict_icmp
        self.interface: Optional[str] = args.interface

    @property
    def last_ttl(self) -> int:
        return self.first_ttl + self.max_ttl - 1


class ScheduleConfig:
    def __init__(self, args):
        self.window: int = args.parallel

    @property
    def parallel(self) -> bool:
        return self.window > 1


class OutputConfig:
    def __init__(self, args):
        self.numeric: bool = args.numeric
        self.format = _convert_enum(const.OutputChoice, args.output)


class AppConfig:
    """
    Main entry point for accessing the configuration.
    """

    def __init__(self, argv: Optional[List[str]] = None):
        self.args = parser.parse_args(argv)
        self.host: str = self.args.host
        self.probe = ProbeConfig(self.args)
        self.schedule = ScheduleConfig(self.args)
        self.output = OutputConfig(self.args)
        self.verbosity = self.args.verbose - self.args.quiet

    @property
    def log_level(self):
        if self.verbosity <= -2:
            return logsetup.CRITICAL
        elif self.verbosity <= -1:
            return logsetup.ERROR
        elif self.verbosity == 0:  # the default
            return logsetup.WARNING
        elif self.verbosity == 1:
            return logsetup.INFO
        else:
            return logsetup.DEBUG
