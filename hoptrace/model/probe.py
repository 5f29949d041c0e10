from typing import Optional

from .const import OutcomeKind


class ProbeTarget:
    """
    Where probes go and what they look like. Does not change during a run.
    """

    def __init__(self, address: str, base_port: int, packet_size: int, source_address: Optional[str] = None):
        self._address = address
        self._base_port = base_port
        self._packet_size = packet_size
        self._source_address = source_address

    @property
    def address(self) -> str:
        return self._address

    @property
    def base_port(self) -> int:
        return self._base_port

    @property
    def packet_size(self) -> int:
        return self._packet_size

    @property
    def source_address(self) -> Optional[str]:
        return self._source_address

    def port_for(self, ttl: int) -> int:
        return self._base_port + ttl

    def ttl_for(self, port: int) -> int:
        return port - self._base_port

    def __str__(self):
        return f'ProbeTarget({self._address}:{self._base_port}, {self._packet_size} bytes)'


class ProbeAttempt:
    def __init__(self, ttl: int, index: int, dst_port: int, send_time: float):
        self.ttl = ttl
        self.index = index
        self.dst_port = dst_port
        self.send_time = send_time  # time.monotonic() right before the send

    def __repr__(self):
        return f'ProbeAttempt(ttl={self.ttl}, index={self.index}, dst_port={self.dst_port})'


class ProbeOutcome:
    """
    Result of exactly one probe. Only successful probes carry a round-trip time (seconds).
    """

    def __init__(self, kind: OutcomeKind, rtt: Optional[float] = None):
        if kind is OutcomeKind.SUCCESS and rtt is None:
            raise ValueError('A successful outcome requires an RTT')
        if kind is not OutcomeKind.SUCCESS and rtt is not None:
            raise ValueError(f'{kind.name} outcome can not carry an RTT')
        self._kind = kind
        self._rtt = rtt

    @classmethod
    def success(cls, rtt: float) -> 'ProbeOutcome':
        return cls(OutcomeKind.SUCCESS, rtt)

    @classmethod
    def timeout(cls) -> 'ProbeOutcome':
        return cls(OutcomeKind.TIMEOUT)

    @classmethod
    def send_error(cls) -> 'ProbeOutcome':
        return cls(OutcomeKind.SEND_ERROR)

    @classmethod
    def receive_error(cls) -> 'ProbeOutcome':
        return cls(OutcomeKind.RECEIVE_ERROR)

    @property
    def kind(self) -> OutcomeKind:
        return self._kind

    @property
    def rtt(self) -> Optional[float]:
        return self._rtt

    @property
    def rtt_ms(self) -> Optional[float]:
        if self._rtt is None:
            return None
        return self._rtt * 1000

    @property
    def is_success(self) -> bool:
        return self._kind is OutcomeKind.SUCCESS

    def __eq__(self, other):
        if isinstance(other, ProbeOutcome):
            return self._kind is other._kind and self._rtt == other._rtt
        return NotImplemented

    def __hash__(self):
        return hash((self._kind, self._rtt))

    def __repr__(self):
        if self.is_success:
            return f'ProbeOutcome({self._kind.name}, rtt={self._rtt:.6f})'
        return f'ProbeOutcome({self._kind.name})'
