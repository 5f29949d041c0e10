# packets.py
#

import scapy.all as scapy

from .. import libconstants as const
from .. import logsetup
from ..model import IcmpMessage, ParseError, ProbeTarget, ProbeAttempt

log = logsetup.get_root_logger()

__all__ = ['make_udp_probe', 'parse_icmp']

_ERROR_TYPES = (const.ICMP_DEST_UNREACHABLE, const.ICMP_TIME_EXCEEDED)


def make_udp_probe(target: ProbeTarget, attempt: ProbeAttempt) -> scapy.Packet:
    """
    Builds the IP/UDP datagram for attempt. The payload consists of packet_size zero bytes.
    """
    ip = scapy.IP(dst=target.address, ttl=attempt.ttl)
    if target.source_address:
        ip.src = target.source_address
    return ip / scapy.UDP(dport=attempt.dst_port) / scapy.Raw(load=bytes(target.packet_size))


def parse_icmp(raw: bytes) -> IcmpMessage:
    """
    Parses either a complete IPv4 datagram (as delivered by raw sockets on Linux and BSD)
    or a bare ICMP message. Error messages (unreachable, time exceeded) additionally yield
    the UDP destination port of the quoted probe, if it is present.
    """
    if not raw:
        raise ParseError('Empty datagram')

    try:
        if raw[0] >> 4 == 4:
            packet = scapy.IP(raw)
        else:
            packet = scapy.ICMP(raw)
    except Exception as e:  # scapy dissectors raise all sorts of things on garbage
        raise ParseError(f'Unable to dissect datagram: {type(e).__name__} - {e}') from e

    if not packet.haslayer(scapy.ICMP):
        raise ParseError(f'Datagram does not hold an ICMP message: {packet.summary()}')

    icmp = packet[scapy.ICMP]
    quoted_dst_port = None
    if icmp.type in _ERROR_TYPES and icmp.haslayer(scapy.UDPerror):
        quoted_dst_port = icmp[scapy.UDPerror].dport

    return IcmpMessage(icmp.type, icmp.code, quoted_dst_port)
