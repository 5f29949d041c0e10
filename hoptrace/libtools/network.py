# network.py
#

import os
import platform
import socket
from typing import List, Optional

import netifaces

from .. import logsetup
from ..model import ConfigurationException, ResolutionError, PrivilegeError

log = logsetup.get_root_logger()

__all__ = ['resolve_host', 'reverse_lookup', 'interface_address', 'check_privileges']


def resolve_host(hoststr: str) -> List[str]:
    """
    Resolves hoststr to all IPv4 addresses in the order returned by 'getaddrinfo', without duplicates.
    Raises ResolutionError if there are none.
    """
    try:
        # [(family, type, proto, canonname, sockaddr)] -> [sockaddr] -> (address, port)
        infos = socket.getaddrinfo(hoststr, None, socket.AF_INET)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(f'Could not resolve hostname [{hoststr}]: {e}') from e

    addresses = []
    for info in infos:
        address = info[4][0]
        if address not in addresses:
            addresses.append(address)
    if not addresses:
        raise ResolutionError(f'No IPv4 address found for [{hoststr}]')

    log.debug(f'Resolved [{hoststr}] to {addresses}')
    return addresses


def reverse_lookup(address: str) -> Optional[str]:
    """
    Returns the DNS name of address without the trailing dot, None if there is none.
    """
    try:
        name = socket.gethostbyaddr(address)[0]
    except (socket.herror, socket.gaierror, OSError) as e:
        log.debug(f'Reverse lookup for {address} failed: {e}')
        return None
    name = name.rstrip('.')
    return name or None


def interface_address(iface: str) -> str:
    """
    Returns the first IPv4 address assigned to iface, excluding point-to-point peers.
    """
    if iface not in netifaces.interfaces():
        raise ConfigurationException(f'No such interface [{iface}], known: {netifaces.interfaces()}')

    ifaddr = netifaces.ifaddresses(iface)
    if netifaces.AF_INET in ifaddr.keys():
        for link in ifaddr[netifaces.AF_INET]:
            if 'addr' in link.keys() and 'peer' not in link.keys():  # exclude 'peer' (loopback address)
                return link['addr']

    raise ConfigurationException(f'Interface [{iface}] has no IPv4 address')


def check_privileges():
    """
    Raw sockets need root on everything but Windows.
    """
    if platform.system() != 'Windows' and os.geteuid() != 0:
        raise PrivilegeError('Insufficient privileges: try running with sudo')

