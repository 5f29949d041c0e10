# libtraceroute/transmitter.py
#

import abc
from typing import Optional

import scapy.all as scapy

from .. import logsetup
from ..libtools import packets
from ..model import ProbeTarget, ProbeAttempt, SendError

log = logsetup.get_root_logger()


class ProbeTransmitter(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def send(self, target: ProbeTarget, attempt: ProbeAttempt):
        """Send exactly one probe datagram for attempt, raise SendError if that is not possible"""
        raise NotImplementedError


class UdpTransmitter(ProbeTransmitter):
    """
    Sends UDP probes through a scapy layer 3 socket. Every probe gets its own socket,
    which is closed right after the send.
    """

    def __init__(self, iface: Optional[str] = None, socket_factory=None):
        self.iface = iface
        # looked up per send, scapy picks the platform's socket class late
        self.socket_factory = socket_factory

    def send(self, target: ProbeTarget, attempt: ProbeAttempt):
        try:
            packet = packets.make_udp_probe(target, attempt)
            factory = self.socket_factory or scapy.conf.L3socket
            with factory(iface=self.iface) as sock:
                sock.send(packet)
        except (OSError, ValueError, scapy.Scapy_Exception) as e:
            raise SendError(f'Sending probe {attempt} to {target.address} failed: {type(e).__name__} - {e}') from e
