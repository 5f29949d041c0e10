"""
Scripted stand-ins for the network: the transmitter records every attempt and queues the
scripted response for it, the listener hands the queued responses out.
"""
import itertools
import queue
import threading
from typing import Dict, Tuple, Optional

import scapy.all as scapy

from hoptrace.libtraceroute import ProbeTransmitter, ResponseListener
from hoptrace.model import ProbeTarget, ProbeAttempt, SendError, ReceiveTimeout, ReceiveError

LOCAL = '192.0.2.100'
DESTINATION = '198.51.100.7'

SEND_FAILURE = object()


class Reply:
    def __init__(self, raw: bytes, sender: str):
        self.raw = raw
        self.sender = sender


def time_exceeded(router: str, target: ProbeTarget, ttl: int) -> Reply:
    return _icmp_error(router, target, ttl, icmp_type=11, code=0)


def port_unreachable(target: ProbeTarget, ttl: int) -> Reply:
    return _icmp_error(target.address, target, ttl, icmp_type=3, code=3)


def echo_reply(sender: str) -> Reply:
    packet = scapy.IP(src=sender, dst=LOCAL) / scapy.ICMP(type=0, code=0) / scapy.Raw(load=b'hoptrace')
    return Reply(bytes(packet), sender)


def other_icmp(sender: str, icmp_type: int = 5) -> Reply:
    packet = scapy.IP(src=sender, dst=LOCAL) / scapy.ICMP(type=icmp_type, code=1)
    return Reply(bytes(packet), sender)


def garbage(sender: str) -> Reply:
    packet = scapy.IP(src=sender, dst=LOCAL) / scapy.UDP(sport=40001, dport=40002)
    return Reply(bytes(packet), sender)


def _icmp_error(sender: str, target: ProbeTarget, ttl: int, icmp_type: int, code: int) -> Reply:
    quoted = scapy.IP(src=LOCAL, dst=target.address, ttl=1) / scapy.UDP(sport=40000, dport=target.port_for(ttl))
    packet = scapy.IP(src=sender, dst=LOCAL) / scapy.ICMP(type=icmp_type, code=code) / quoted
    return Reply(bytes(packet), sender)


class ScriptedNetwork:
    """
    script: {(ttl, probe index): Reply | SEND_FAILURE}, anything not scripted times out.
    default: optional function (target, ttl, index) -> Reply | SEND_FAILURE | None for unscripted probes.
    """

    def __init__(self, script: Dict[Tuple[int, int], object] = None, default=None):
        self.script = dict(script or {})
        self.default = default
        self.sent = []
        self.lock = threading.Lock()
        self.pending = queue.Queue()

    def response_for(self, target: ProbeTarget, attempt: ProbeAttempt):
        key = (attempt.ttl, attempt.index)
        if key in self.script:
            return self.script[key]
        if self.default is not None:
            return self.default(target, attempt.ttl, attempt.index)
        return None

    def sent_ttls(self):
        with self.lock:
            return [it.ttl for it in self.sent]


class FakeTransmitter(ProbeTransmitter):
    def __init__(self, network: ScriptedNetwork):
        self.network = network

    def send(self, target: ProbeTarget, attempt: ProbeAttempt):
        with self.network.lock:
            self.network.sent.append(attempt)
        response = self.network.response_for(target, attempt)
        if response is SEND_FAILURE:
            raise SendError(f'scripted failure for {attempt}')
        if response is not None:
            self.network.pending.put((response.raw, response.sender))


class FakeListener(ResponseListener):
    """
    block: seconds a read waits for a queued response at most, 0 answers immediately.
    fail_after: number of successful reads before every further read raises ReceiveError.
    """

    def __init__(self, network: ScriptedNetwork, block: float = 0, fail_after: Optional[int] = None):
        self.network = network
        self.block = block
        self.fail_after = fail_after
        self.reads = 0
        self.closed = False

    def read(self, timeout: float):
        if self.closed:
            raise ReceiveError('listener closed')
        if self.fail_after is not None and self.reads >= self.fail_after:
            raise ReceiveError('scripted receive failure')
        try:
            if self.block > 0:
                item = self.network.pending.get(timeout=max(min(timeout, self.block), 0))
            else:
                item = self.network.pending.get_nowait()
        except queue.Empty:
            raise ReceiveTimeout('nothing queued')
        self.reads += 1
        return item

    def close(self):
        self.closed = True


def stepping_clock(step: float = 0.001, start: float = 0.0):
    """Deterministic clock advancing by step on every call, beginning at start."""
    counter = itertools.count()
    lock = threading.Lock()

    def clock():
        with lock:
            return start + next(counter) * step

    return clock
