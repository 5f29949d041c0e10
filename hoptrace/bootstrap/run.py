from .wiring import Wiring
from .. import logsetup, libtraceroute, report
from ..model import ProbeTarget, TraceReport, HopResult
from ..model.const import OutputChoice

"""
Runs the actual business logic of the application, calling high-level API methods of other modules.
"""

log = logsetup.get_root_logger()


def run(wiring: Wiring, out=print) -> TraceReport:
    conf = wiring.conf
    addresses = wiring.resolve(conf.host)
    destination = addresses[0]
    if len(addresses) > 1:
        log.warning(f'{conf.host} has multiple addresses; using {destination}')

    out(report.format_header(conf.host, destination, conf.probe.max_ttl, conf.probe.packet_size))
    wiring.check_privileges()

    target = ProbeTarget(destination, conf.probe.base_port, conf.probe.packet_size, wiring.source_address)
    stream_lines = conf.output.format is OutputChoice.LINES

    def _print_hop(hop: HopResult):
        out(report.format_hop(hop))

    with wiring.listener_factory() as listener:
        sweep = libtraceroute.create_sweep(
            target, wiring.transmitter, listener,
            first_ttl=conf.probe.first_ttl, max_ttl=conf.probe.max_ttl,
            wait=conf.probe.wait, probes=conf.probe.probes, strict=conf.probe.strict,
            window=conf.schedule.window, resolver=wiring.reverse_lookup,
            on_hop=_print_hop if stream_lines else None
        )
        trace = sweep.run()

    if not stream_lines:
        out(report.format_table(trace))
    return trace
