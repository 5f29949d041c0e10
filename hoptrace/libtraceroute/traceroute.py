# libtraceroute/traceroute.py
#

from typing import Optional, Callable

from .hopprober import HopProber
from .. import logsetup
from ..libtools import validate_at_least
from ..model import HopResult, TraceReport

log = logsetup.get_root_logger()


class Traceroute(object):
    """
    Sweeps the TTLs first_ttl .. first_ttl + max_ttl - 1 one after another and stops
    as soon as the destination answered. Not reaching the destination is not an error,
    the report just says so.

    resolver  reverse name lookup, ip -> name or None (optional)
    on_hop    called with each finished hop in TTL order (optional)
    """

    def __init__(
            self, hop_prober: HopProber, first_ttl: int, max_ttl: int,
            resolver: Optional[Callable[[str], Optional[str]]] = None,
            on_hop: Optional[Callable[[HopResult], None]] = None
    ):
        validate_at_least(first_ttl, 1, 'First TTL')
        validate_at_least(max_ttl, 1, 'Max TTL')
        self.hop_prober = hop_prober
        self.target = hop_prober.target
        self.first_ttl = first_ttl
        self.max_ttl = max_ttl
        self.resolver = resolver
        self.on_hop = on_hop

    def run(self) -> TraceReport:
        report = TraceReport(self.target.address, self.first_ttl, self.max_ttl)

        ttl = self.first_ttl
        while ttl < self.first_ttl + self.max_ttl and not report.reached:
            hop = self.hop_prober.probe_ttl(ttl)
            self._complete(report, hop)
            ttl += 1

        self._log_summary(report)
        return report

    def _complete(self, report: TraceReport, hop: HopResult):
        hop = self._with_name(hop)
        report.append(hop)
        if self.on_hop is not None:
            self.on_hop(hop)

    def _with_name(self, hop: HopResult) -> HopResult:
        if hop.address is None or self.resolver is None:
            return hop
        return hop.with_display_name(self.resolver(hop.address))

    def _log_summary(self, report: TraceReport):
        if report.reached:
            log.info(f'Reached {report.destination} after {len(report)} hops')
        else:
            log.info(f'Did not reach {report.destination} within {self.max_ttl} hops')
