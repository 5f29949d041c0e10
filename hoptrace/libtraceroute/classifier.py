# libtraceroute/classifier.py
#

from .. import libconstants as const
from ..model import IcmpMessage
from ..model.const import Classification

_HOP_TYPES = (const.ICMP_TIME_EXCEEDED, const.ICMP_DEST_UNREACHABLE)


def classify(message: IcmpMessage, sender: str, destination: str, strict: bool = False) -> Classification:
    """
    Time exceeded and unreachable come from a hop, echo replies only count if the destination sent them.
    Unknown types are treated like a hop response unless strict is set, then they are ignored.
    """
    if message.type in _HOP_TYPES:
        return Classification.HOP
    if message.type == const.ICMP_ECHO_REPLY:
        if sender == destination:
            return Classification.DESTINATION
        return Classification.NOISE
    if strict:
        return Classification.NOISE
    return Classification.UNCLASSIFIED
