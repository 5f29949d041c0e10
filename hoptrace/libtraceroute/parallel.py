# libtraceroute/parallel.py
#

import contextlib
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Tuple, Callable

from .hopprober import HopProber
from .listener import ResponseListener
from .transmitter import ProbeTransmitter
from .traceroute import Traceroute
from .. import libconstants as const
from .. import logsetup
from ..libtools import packets, validate_at_least
from ..model import ProbeTarget, ProbeAttempt, IcmpMessage, HopResult, TraceReport, \
    ReceiveTimeout, ReceiveError, ParseError

log = logsetup.get_root_logger()


class ReachedGate:
    """
    Shared between the workers of a window. Remembers the lowest TTL at which the destination
    answered and refuses sends for any greater TTL from then on. Sends and the marking are
    serialised, so no probe beyond that TTL leaves after the destination answered.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._reached_at: Optional[int] = None

    @contextlib.contextmanager
    def sending(self, ttl: int):
        with self._lock:
            yield self._reached_at is None or ttl <= self._reached_at

    def mark_reached(self, ttl: int):
        with self._lock:
            if self._reached_at is None or ttl < self._reached_at:
                self._reached_at = ttl

    @property
    def reached_at(self) -> Optional[int]:
        with self._lock:
            return self._reached_at


class ResponseDispatcher(threading.Thread):
    """
    The only reader of the listener while a parallel sweep runs. Routes every parsed message
    to the TTL whose port is quoted in it. Messages without a quoted port (e.g. echo replies)
    go to the lowest TTL currently waiting, quoted ports nobody waits for are dropped.
    """

    # put into every queue when reading failed
    _FAILED = None

    def __init__(
            self, listener: ResponseListener, target: ProbeTarget,
            poll_interval: float = const.DISPATCH_POLL_INTERVAL, clock: Callable[[], float] = time.monotonic
    ):
        super().__init__(name='response-dispatcher', daemon=True)
        self.listener = listener
        self.target = target
        self.poll_interval = poll_interval
        self.clock = clock
        self.error: Optional[ReceiveError] = None
        self._queues: Dict[int, queue.Queue] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()

    def register(self, ttl: int):
        with self._lock:
            self._queues[ttl] = queue.Queue()
            if self.error is not None:
                self._queues[ttl].put(self._FAILED)

    def unregister(self, ttl: int):
        with self._lock:
            self._queues.pop(ttl, None)

    def receive(self, ttl: int, timeout: float) -> Tuple[IcmpMessage, str, float]:
        with self._lock:
            responses = self._queues[ttl]
        try:
            delivery = responses.get(timeout=max(timeout, 0))
        except queue.Empty:
            raise ReceiveTimeout(f'No ICMP message for TTL {ttl} within {timeout:.3f}s')
        if delivery is self._FAILED:
            raise ReceiveError(f'Response dispatcher stopped: {self.error}')
        return delivery

    def run(self):
        while not self._stop_event.is_set():
            try:
                raw, sender = self.listener.read(self.poll_interval)
            except ReceiveTimeout:
                continue
            except ReceiveError as e:
                log.error(f'Response dispatcher failed: {e}')
                self._fail_all(e)
                return
            self._route(raw, sender, self.clock())
        log.debug('Response dispatcher terminated.')

    def stop(self):
        self._stop_event.set()
        if self.is_alive():
            self.join()

    def _route(self, raw: bytes, sender: str, received_at: float):
        try:
            message = packets.parse_icmp(raw)
        except ParseError as e:
            log.debug(f'[Ignored] Unparseable message from {sender}: {e}')
            return

        with self._lock:
            if message.quoted_dst_port is not None:
                ttl = self.target.ttl_for(message.quoted_dst_port)
            elif self._queues:
                ttl = min(self._queues)
            else:
                ttl = None
            responses = self._queues.get(ttl)

        if responses is None:
            log.debug(f'[Ignored] {message} from {sender}, nobody waiting for it')
            return
        responses.put((message, sender, received_at))

    def _fail_all(self, error: ReceiveError):
        with self._lock:
            self.error = error
            for responses in self._queues.values():
                responses.put(self._FAILED)


class DispatchedHopProber(HopProber):
    """
    HopProber which takes its responses from a ResponseDispatcher instead of reading the listener.
    """

    def __init__(self, dispatcher: ResponseDispatcher, target: ProbeTarget, transmitter: ProbeTransmitter, **kwargs):
        super().__init__(target, transmitter, None, **kwargs)
        self.dispatcher = dispatcher

    def _receive(self, attempt: ProbeAttempt, timeout: float) -> Tuple[IcmpMessage, str, float]:
        return self.dispatcher.receive(attempt.ttl, timeout)


class ParallelTraceroute(Traceroute):
    """
    Probes windows of up to 'window' TTLs concurrently, the probes of each TTL are still sent
    one after another. Hops are reported in TTL order regardless of which worker finished first,
    and nothing beyond the first TTL at which the destination answered ends up in the report.
    """

    def __init__(
            self, target: ProbeTarget, transmitter: ProbeTransmitter, listener: ResponseListener,
            first_ttl: int, max_ttl: int, window: int,
            wait: float = const.WAIT_TIMEOUT, probes: int = const.PROBES_PER_TTL, strict: bool = False,
            resolver=None, on_hop=None, clock: Callable[[], float] = time.monotonic,
            poll_interval: float = const.DISPATCH_POLL_INTERVAL
    ):
        validate_at_least(window, 1, 'Window')
        self.dispatcher = ResponseDispatcher(listener, target, poll_interval=poll_interval, clock=clock)
        hop_prober = DispatchedHopProber(
            self.dispatcher, target, transmitter, wait=wait, probes=probes, strict=strict, clock=clock
        )
        super().__init__(hop_prober, first_ttl, max_ttl, resolver=resolver, on_hop=on_hop)
        self.window = window

    def run(self) -> TraceReport:
        report = TraceReport(self.target.address, self.first_ttl, self.max_ttl)
        gate = ReachedGate()
        end = self.first_ttl + self.max_ttl

        self.dispatcher.start()
        try:
            with ThreadPoolExecutor(max_workers=self.window, thread_name_prefix='ttl') as executor:
                ttl = self.first_ttl
                while ttl < end and not report.reached:
                    ttls = range(ttl, min(ttl + self.window, end))
                    futures = {it: executor.submit(self._probe, it, gate) for it in ttls}
                    for it in ttls:  # collect in TTL order, not completion order
                        hop = futures[it].result()
                        if hop is None or report.reached:
                            continue
                        self._complete(report, hop)
                    ttl = ttls.stop
        finally:
            self.dispatcher.stop()

        if self.dispatcher.error is not None:
            raise self.dispatcher.error
        self._log_summary(report)
        return report

    def _probe(self, ttl: int, gate: ReachedGate) -> Optional[HopResult]:
        self.dispatcher.register(ttl)
        try:
            return self.hop_prober.probe_ttl(ttl, gate=gate)
        finally:
            self.dispatcher.unregister(ttl)
