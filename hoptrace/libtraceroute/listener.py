# libtraceroute/listener.py
#

import abc
import select
import time
from typing import Optional, Tuple

import scapy.all as scapy

from .. import logsetup
from ..model import ReceiveTimeout, ReceiveError, PrivilegeError, ListenerSetupError

log = logsetup.get_root_logger()


class ResponseListener(metaclass=abc.ABCMeta):
    """
    The single receiver of inbound ICMP traffic for a run. Routers address their replies
    to the probe's source, not to a listening port, so one receiver sees everything.
    At most one read may be outstanding at any time.
    """

    @abc.abstractmethod
    def read(self, timeout: float) -> Tuple[bytes, str]:
        """
        Returns (datagram, sender address) of the next inbound message.
        Raises ReceiveTimeout if nothing arrived within timeout seconds
        and ReceiveError if the receiver is broken.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def close(self):
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class IcmpListener(ResponseListener):
    """
    Listens on a scapy layer 2 listen socket filtered to ICMP, opened once for the whole run.
    With a known local address the filter is narrowed to messages sent to it.
    """

    def __init__(self, iface: Optional[str] = None, local_address: Optional[str] = None, sock=None, socket_factory=None):
        self.packet_filter = 'icmp' if local_address is None else f'icmp and dst host {local_address}'
        self._sock = sock if sock is not None else self._open(iface, socket_factory or scapy.conf.L2listen)

    def _open(self, iface: Optional[str], socket_factory):
        try:
            return socket_factory(iface=iface, type=scapy.ETH_P_ALL, filter=self.packet_filter)
        except PermissionError as e:
            raise PrivilegeError(f'Not permitted to open listen socket: {e}') from e
        except (OSError, scapy.Scapy_Exception) as e:
            raise ListenerSetupError(f'Could not create listen socket: {type(e).__name__} - {e}') from e

    def read(self, timeout: float) -> Tuple[bytes, str]:
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ReceiveTimeout(f'No ICMP message within {timeout:.3f}s')
            try:
                rlist, _, _ = select.select([self._sock], [], [], remaining)
                if not rlist:
                    continue
                packet = self._sock.recv()
            except (OSError, ValueError, scapy.Scapy_Exception) as e:  # ValueError: select() on a closed socket
                raise ReceiveError(f'Could not read ICMP message: {type(e).__name__} - {e}') from e
            # recv() yields None for frames the socket dropped itself
            if packet is None or scapy.IP not in packet:
                continue
            ip = packet[scapy.IP]
            return bytes(ip), ip.src

    def close(self):
        self._sock.close()
