# report.py
#

"""
Text rendering of traceroute results, either as classic traceroute lines or as a table.
"""

from prettytable import PrettyTable

from . import libconstants as const
from .model import HopResult, ProbeOutcome, TraceReport


def format_header(host: str, address: str, max_ttl: int, packet_size: int) -> str:
    return f'traceroute to {host} ({address}), {max_ttl} hops max, {packet_size} byte packets'


def format_outcome(outcome: ProbeOutcome) -> str:
    if outcome.is_success:
        return f'{outcome.rtt_ms:.3f} ms'
    return const.MISSING_MARKER


def format_hop(hop: HopResult) -> str:
    """
    '3  router.example.net (192.0.2.1)  1.234 ms * 1.456 ms'
    Falls back to the numeric address if there is no name.
    """
    results = ' '.join(format_outcome(it) for it in hop.outcomes)
    if hop.address:
        return f'{hop.ttl}  {hop.display_name or hop.address} ({hop.address})  {results}'
    return f'{hop.ttl}  {results}'


def format_table(report: TraceReport) -> str:
    table = PrettyTable(['Hop', 'Address', 'Name', 'Probes', 'Loss'])
    table.align['Probes'] = 'l'

    for hop in report:
        table.add_row((
            hop.ttl,
            hop.address or const.MISSING_MARKER,
            hop.display_name or '',
            ' '.join(format_outcome(it) for it in hop.outcomes),
            f'{hop.loss:.0%}',
        ))

    status = 'reached' if report.reached else 'not reached'
    return f'{table}\nDestination {report.destination} {status} after {len(report)} hops'
