# libtraceroute/hopprober.py
#

import time
from typing import Optional, Tuple, Callable

from .classifier import classify
from .listener import ResponseListener
from .transmitter import ProbeTransmitter
from .. import libconstants as const
from .. import logsetup
from ..libtools import packets
from ..model import ProbeTarget, ProbeAttempt, ProbeOutcome, HopResult, IcmpMessage, \
    SendError, ReceiveTimeout, ParseError
from ..model.const import Classification

log = logsetup.get_root_logger()


class HopProber:
    """
    Probes a single TTL: sends the configured number of probes one after another and
    waits for at most one response after each of them.

    The first probe that gets an answer determines the responding address of the hop,
    later answers at the same TTL only contribute their RTT.

    gate (optional) is consulted right before each send and informed as soon as the
    destination answers, see parallel.ReachedGate.
    """

    def __init__(
            self, target: ProbeTarget, transmitter: ProbeTransmitter, listener: Optional[ResponseListener],
            wait: float = const.WAIT_TIMEOUT, probes: int = const.PROBES_PER_TTL, strict: bool = False,
            clock: Callable[[], float] = time.monotonic
    ):
        self.target = target
        self.transmitter = transmitter
        self.listener = listener
        self.wait = wait
        self.probes = probes
        self.strict = strict
        self.clock = clock

    def probe_ttl(self, ttl: int, gate=None) -> Optional[HopResult]:
        """
        Returns None only if gate withdrew the permission to probe this TTL.
        ReceiveError is not handled here, it ends the whole sweep.
        """
        address = None
        reached = False
        outcomes = []

        for index in range(self.probes):
            if gate is not None:
                with gate.sending(ttl) as allowed:
                    if not allowed:
                        log.debug(f'TTL {ttl}: destination reached at a lower TTL, abandoning')
                        return None
                    attempt, sent = self._send(ttl, index)
            else:
                attempt, sent = self._send(ttl, index)

            if not sent:
                outcomes.append(ProbeOutcome.send_error())
                continue

            outcome, sender, classification = self._await_response(attempt)
            outcomes.append(outcome)
            if sender is None:
                continue
            if address is None:
                address = sender
            if classification is Classification.DESTINATION or sender == self.target.address:
                if not reached and gate is not None:
                    gate.mark_reached(ttl)
                reached = True

        return HopResult(ttl, address, outcomes, reached=reached)

    def _send(self, ttl: int, index: int) -> Tuple[ProbeAttempt, bool]:
        attempt = ProbeAttempt(ttl, index, self.target.port_for(ttl), self.clock())
        try:
            self.transmitter.send(self.target, attempt)
        except SendError as e:
            log.debug(f'TTL {ttl} probe {index}: {e}')
            return attempt, False
        return attempt, True

    def _await_response(self, attempt: ProbeAttempt) -> Tuple[ProbeOutcome, Optional[str], Optional[Classification]]:
        deadline = attempt.send_time + self.wait
        while True:
            try:
                message, sender, received_at = self._receive(attempt, deadline - self.clock())
            except ReceiveTimeout:
                return ProbeOutcome.timeout(), None, None
            except ParseError as e:
                log.debug(f'TTL {attempt.ttl} probe {attempt.index}: unparseable response: {e}')
                return ProbeOutcome.timeout(), None, None
            if not self._is_late(attempt, message, received_at):
                break
            log.debug(f'TTL {attempt.ttl} probe {attempt.index}: [Ignored] late {message} from {sender}')

        classification = classify(message, sender, self.target.address, strict=self.strict)
        log.debug(f'TTL {attempt.ttl} probe {attempt.index}: {message} from {sender} -> {classification.name}')
        if not classification.is_answer:
            return ProbeOutcome.timeout(), None, classification

        rtt = min(received_at - attempt.send_time, self.wait)
        return ProbeOutcome.success(rtt), sender, classification

    @staticmethod
    def _is_late(attempt: ProbeAttempt, message: IcmpMessage, received_at: float) -> bool:
        """
        True for answers to earlier probes: received before attempt was sent,
        or quoting the port of another TTL.
        """
        if received_at < attempt.send_time:
            return True
        return message.quoted_dst_port is not None and message.quoted_dst_port != attempt.dst_port

    def _receive(self, attempt: ProbeAttempt, timeout: float) -> Tuple[IcmpMessage, str, float]:
        raw, sender = self.listener.read(timeout)
        received_at = self.clock()
        return packets.parse_icmp(raw), sender, received_at
