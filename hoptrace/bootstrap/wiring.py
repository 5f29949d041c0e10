import functools
from typing import Callable, List, Optional

from .. import logsetup
from ..config.model import AppConfig
from ..libtools import network
from ..libtraceroute import ProbeTransmitter, ResponseListener, UdpTransmitter, IcmpListener


class Wiring:
    """
    Holds and initialises major singleton objects used around the application, inspired by Dependency Injection,
    but implemented as a poor person's solution with a single object holding everything.
    Collaborators can be replaced through the keyword arguments, e.g. for tests.
    """

    def __init__(
            self, conf: AppConfig,
            transmitter: ProbeTransmitter = None,
            listener_factory: Callable[[], ResponseListener] = None,
            resolve: Callable[[str], List[str]] = network.resolve_host,
            reverse_lookup: Callable[[str], Optional[str]] = network.reverse_lookup,
            check_privileges: Callable[[], None] = network.check_privileges,
    ):
        self.conf: AppConfig = conf
        self.log = logsetup.get_root_logger()
        self.source_address = None
        if conf.probe.interface:
            self.source_address = network.interface_address(conf.probe.interface)
            self.log.info(f'Sending probes from {conf.probe.interface} ({self.source_address})')
        self.transmitter = transmitter or UdpTransmitter(iface=conf.probe.interface)
        self.listener_factory = listener_factory or functools.partial(
            IcmpListener, iface=conf.probe.interface, local_address=self.source_address
        )
        self.resolve = resolve
        self.reverse_lookup = None if conf.output.numeric else reverse_lookup
        self.check_privileges = check_privileges
