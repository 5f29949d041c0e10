import os
import sys

from hoptrace import libconstants as const
from hoptrace.config.args import parser
from hoptrace.config.model import ProbeConfig


def print_usage_and_exit(message):
    parser.print_usage(sys.stderr)
    basename = os.path.basename(sys.argv[0])
    sys.stderr.write(f'{basename}: error: {message}\n')
    sys.exit(2)


def check_limits(probe: ProbeConfig):
    """
    Cross-checks the probing flags against each other, which argparse can not do.
    Exits like a usage error if the TTL range or the probe ports would overflow.
    """
    if probe.first_ttl > const.TTL_LIMIT:
        print_usage_and_exit(f'--first-ttl can not exceed {const.TTL_LIMIT}')
    if probe.last_ttl > const.TTL_LIMIT:
        print_usage_and_exit(f'--first-ttl + --max-ttl - 1 can not exceed {const.TTL_LIMIT}')
    if probe.base_port + probe.last_ttl > const.PORT_LIMIT:
        print_usage_and_exit(f'--port + last TTL can not exceed {const.PORT_LIMIT} [was {probe.base_port + probe.last_ttl}]')
