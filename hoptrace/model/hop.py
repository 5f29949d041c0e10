from typing import Optional, Sequence, Tuple, List

from .probe import ProbeOutcome


class HopResult:
    """
    Everything learned about one TTL: who answered (if anyone) and how every probe went.
    """

    def __init__(
            self, ttl: int, address: Optional[str], outcomes: Sequence[ProbeOutcome],
            display_name: Optional[str] = None, reached: bool = False
    ):
        self._ttl = ttl
        self._address = address
        self._outcomes: Tuple[ProbeOutcome, ...] = tuple(outcomes)
        self._display_name = display_name
        self._reached = reached

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def address(self) -> Optional[str]:
        return self._address

    @property
    def display_name(self) -> Optional[str]:
        return self._display_name

    @property
    def outcomes(self) -> Tuple[ProbeOutcome, ...]:
        return self._outcomes

    @property
    def reached(self) -> bool:
        """Whether the destination itself answered at this TTL"""
        return self._reached

    @property
    def loss(self) -> float:
        if not self._outcomes:
            return 0.0
        lost = sum(1 for it in self._outcomes if not it.is_success)
        return lost / len(self._outcomes)

    def with_display_name(self, display_name: Optional[str]) -> 'HopResult':
        return HopResult(self._ttl, self._address, self._outcomes, display_name, self._reached)

    def as_tuple(self) -> Tuple[int, str, Optional[str], Tuple[ProbeOutcome, ...]]:
        return self._ttl, self._address or '', self._display_name, self._outcomes

    def __eq__(self, other):
        if isinstance(other, HopResult):
            return self.as_tuple() == other.as_tuple() and self._reached == other._reached
        return NotImplemented

    def __repr__(self):
        return f'HopResult(ttl={self._ttl}, address={self._address}, outcomes={list(self._outcomes)})'


class TraceReport:
    """
    Accumulated hops of one sweep, in TTL order.
    """

    def __init__(self, destination: str, first_ttl: int, max_ttl: int):
        self.destination = destination
        self.first_ttl = first_ttl
        self.max_ttl = max_ttl
        self._hops: List[HopResult] = []
        self._reached = False

    @property
    def hops(self) -> Tuple[HopResult, ...]:
        return tuple(self._hops)

    @property
    def reached(self) -> bool:
        return self._reached

    @property
    def next_ttl(self) -> int:
        if not self._hops:
            return self.first_ttl
        return self._hops[-1].ttl + 1

    def append(self, hop: HopResult):
        if self._reached:
            raise ValueError(f'Destination already reached, refusing to add hop {hop.ttl}')
        if hop.ttl != self.next_ttl:
            raise ValueError(f'Expected hop for TTL {self.next_ttl}, got {hop.ttl}')
        self._hops.append(hop)
        if hop.reached:
            self._reached = True

    def __len__(self):
        return len(self._hops)

    def __iter__(self):
        return iter(self._hops)
