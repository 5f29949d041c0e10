import argparse
import textwrap

from .. import libconstants
from ..model import const


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f'must be a positive integer [was {value}]')
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f'can not be negative [was {value}]')
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f'must be greater than zero [was {value}]')
    return number


def _prepare_parser():
    created_parser = argparse.ArgumentParser(
        prog='hoptrace',
        description=textwrap.dedent('Print the route packets take to a network host')
    )

    target_grp = created_parser.add_argument_group(title='TARGET', description=None)
    target_grp.add_argument('host', help='Host name or IPv4 address of the destination')
    target_grp.add_argument(
        '-i', '--interface', help='Send probes from the IPv4 address of this interface (default: routing decides)',
        default=None
    )

    probe_grp = created_parser.add_argument_group(title='PROBING', description=None)
    probe_grp.add_argument(
        '-s', '--packet-size', type=_non_negative_int,
        help=f'Size of the probe payload in bytes (default {libconstants.PACKET_SIZE})',
        default=libconstants.PACKET_SIZE
    )
    probe_grp.add_argument(
        '-f', '--first-ttl', type=_positive_int,
        help=f'Initial time-to-live used in outgoing probes (default {libconstants.FIRST_TTL})',
        default=libconstants.FIRST_TTL
    )
    probe_grp.add_argument(
        '-m', '--max-ttl', type=_positive_int,
        help=f'Maximum number of hops (TTLs) to probe (default {libconstants.MAX_TTL})',
        default=libconstants.MAX_TTL
    )
    probe_grp.add_argument(
        '-p', '--port', type=_positive_int,
        help=f'Base port, probes for TTL t go to port+t (default {libconstants.BASE_PORT})',
        default=libconstants.BASE_PORT
    )
    probe_grp.add_argument(
        '-w', '--wait', type=_positive_float,
        help=f'Time in seconds to wait for a response to a probe (default {libconstants.WAIT_TIMEOUT})',
        default=libconstants.WAIT_TIMEOUT
    )
    probe_grp.add_argument(
        '-q', '--nqueries', type=_positive_int,
        help=f'Number of probes per TTL (default {libconstants.PROBES_PER_TTL})',
        default=libconstants.PROBES_PER_TTL
    )
    probe_grp.add_argument(
        '--strict-icmp', action='store_true',
        help='Ignore ICMP types other than time exceeded, unreachable and echo reply '
             'instead of counting them as hop responses',
        default=False
    )

    schedule_grp = created_parser.add_argument_group(title='SCHEDULING', description=None)
    schedule_grp.add_argument(
        '--parallel', type=_positive_int, metavar='N',
        help=f'Probe up to N TTLs at the same time (default {libconstants.PARALLEL_WINDOW}, sequential)',
        default=libconstants.PARALLEL_WINDOW
    )

    output_grp = created_parser.add_argument_group(title='OUTPUT', description=None)
    output_grp.add_argument(
        '-n', '--numeric', action='store_true', help='Do not resolve hop addresses to names', default=False
    )
    default_output = const.OutputChoice.default()
    output_grp.add_argument(
        '--output', action='store', help=f'Report format (default {default_output.name})',
        choices=const.OutputChoice.all_keys(), default=default_output.name
    )

    log_grp = created_parser.add_argument_group(title='LOGGING', description=None)
    logmutualgrp = log_grp.add_mutually_exclusive_group()
    logmutualgrp.add_argument('-v', '--verbose', action='count', help='Increase verbosity once per call', default=0)
    logmutualgrp.add_argument('--quiet', action='count', help='Decrease verbosity once per call', default=0)

    return created_parser


parser = _prepare_parser()
