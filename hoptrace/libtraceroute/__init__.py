# libtraceroute/__init__.py
#
#
# Traceroute module to discover the hops towards a target host
# with UDP probes of increasing TTL.

from .classifier import classify
from .hopprober import HopProber
from .listener import ResponseListener, IcmpListener
from .parallel import ParallelTraceroute, ResponseDispatcher, ReachedGate
from .transmitter import ProbeTransmitter, UdpTransmitter
from .traceroute import Traceroute

from .. import libconstants as const


def create_sweep(
        target, transmitter, listener, first_ttl=const.FIRST_TTL, max_ttl=const.MAX_TTL,
        wait=const.WAIT_TIMEOUT, probes=const.PROBES_PER_TTL, strict=False, window=const.PARALLEL_WINDOW,
        resolver=None, on_hop=None, **kwargs
):
    """
    Sequential sweep for window 1, parallel sweep over windows of TTLs otherwise.
    Remaining kwargs (clock, poll_interval) are passed through for testing.
    """
    if window > 1:
        return ParallelTraceroute(
            target, transmitter, listener, first_ttl, max_ttl, window,
            wait=wait, probes=probes, strict=strict, resolver=resolver, on_hop=on_hop, **kwargs
        )
    hop_prober_kwargs = {k: v for k, v in kwargs.items() if k == 'clock'}
    hop_prober = HopProber(target, transmitter, listener, wait=wait, probes=probes, strict=strict, **hop_prober_kwargs)
    return Traceroute(hop_prober, first_ttl, max_ttl, resolver=resolver, on_hop=on_hop)
