import threading
import time
from unittest import TestCase

from hoptrace.libtraceroute import ParallelTraceroute, ReachedGate, ResponseDispatcher
from hoptrace.libtraceroute.parallel import DispatchedHopProber
from hoptrace.model import ProbeTarget, ReceiveError, ReceiveTimeout
from hoptrace.model.const import OutcomeKind
from hoptrace.tests import fakes
from hoptrace.tests.fakes import ScriptedNetwork, FakeTransmitter, FakeListener

TARGET = ProbeTarget(fakes.DESTINATION, 33434, 40)
WAIT = 0.3


def udp_path(hops: int):
    def respond(target, ttl, index):
        if ttl < hops:
            return fakes.time_exceeded(f'10.0.{ttl}.1', target, ttl)
        return fakes.port_unreachable(target, ttl)

    return respond


def given_parallel(network, window=4, max_ttl=16, listener=None, on_hop=None):
    return ParallelTraceroute(
        TARGET, FakeTransmitter(network), listener or FakeListener(network, block=0.01),
        first_ttl=1, max_ttl=max_ttl, window=window, wait=WAIT, probes=3,
        on_hop=on_hop, poll_interval=0.01
    )


class TestParallelTraceroute(TestCase):
    def test_hops_in_ttl_order_and_truncated_at_destination(self):
        # given
        network = ScriptedNetwork(default=udp_path(6))
        seen = []
        # when
        report = given_parallel(network, window=4, on_hop=seen.append).run()
        # then
        self.assertTrue(report.reached)
        self.assertEqual([hop.ttl for hop in report], [1, 2, 3, 4, 5, 6])
        self.assertEqual([hop.address for hop in report][:5], [f'10.0.{ttl}.1' for ttl in range(1, 6)])
        self.assertEqual(report.hops[-1].address, fakes.DESTINATION)
        self.assertEqual(seen, list(report.hops))
        # the window 5..8 was running, nothing beyond it was started
        self.assertLessEqual(max(network.sent_ttls()), 8)

    def test_outcomes_complete_for_every_hop(self):
        # given
        network = ScriptedNetwork({(2, 1): None, (3, 0): fakes.SEND_FAILURE}, default=udp_path(5))
        # when
        report = given_parallel(network, window=3).run()
        # then
        for hop in report:
            self.assertEqual(len(hop.outcomes), 3)
        self.assertEqual([it.kind for it in report.hops[1].outcomes],
                         [OutcomeKind.SUCCESS, OutcomeKind.TIMEOUT, OutcomeKind.SUCCESS])
        self.assertEqual(report.hops[2].outcomes[0].kind, OutcomeKind.SEND_ERROR)

    def test_first_answer_wins_per_ttl(self):
        # given
        network = ScriptedNetwork({
            (2, 0): fakes.time_exceeded('10.0.2.1', TARGET, 2),
            (2, 1): None,
            (2, 2): fakes.time_exceeded('10.0.2.99', TARGET, 2),
        }, default=udp_path(3))
        # when
        report = given_parallel(network, window=3).run()
        # then
        self.assertEqual(report.hops[1].address, '10.0.2.1')

    def test_unreached_destination_uses_whole_budget(self):
        # given
        network = ScriptedNetwork(default=lambda target, ttl, index: fakes.time_exceeded(f'10.0.{ttl}.1', target, ttl))
        # when
        report = given_parallel(network, window=4, max_ttl=10).run()
        # then
        self.assertFalse(report.reached)
        self.assertEqual([hop.ttl for hop in report], list(range(1, 11)))

    def test_receive_error_aborts(self):
        # given
        network = ScriptedNetwork(default=udp_path(8))
        listener = FakeListener(network, block=0.01, fail_after=2)
        # when / then
        with self.assertRaises(ReceiveError):
            given_parallel(network, listener=listener).run()


class TestReachedGate(TestCase):
    def test_blocks_greater_ttls_once_reached(self):
        # given
        gate = ReachedGate()
        # when
        gate.mark_reached(7)
        gate.mark_reached(9)
        # then
        self.assertEqual(gate.reached_at, 7)
        with gate.sending(7) as allowed:
            self.assertTrue(allowed)
        with gate.sending(8) as allowed:
            self.assertFalse(allowed)

    def test_open_before_reached(self):
        gate = ReachedGate()
        with gate.sending(200) as allowed:
            self.assertTrue(allowed)
        self.assertIsNone(gate.reached_at)


class TestResponseDispatcher(TestCase):
    def setUp(self):
        self.network = ScriptedNetwork()
        self.dispatcher = ResponseDispatcher(
            FakeListener(self.network, block=0.01), TARGET, poll_interval=0.01, clock=time.monotonic
        )

    def tearDown(self):
        self.dispatcher.stop()

    def _inject(self, reply):
        self.network.pending.put((reply.raw, reply.sender))

    def test_routes_by_quoted_port(self):
        # given
        self.dispatcher.register(2)
        self.dispatcher.register(5)
        self.dispatcher.start()
        # when
        self._inject(fakes.time_exceeded('10.0.5.1', TARGET, 5))
        self._inject(fakes.time_exceeded('10.0.2.1', TARGET, 2))
        # then
        message, sender, _ = self.dispatcher.receive(5, 1.0)
        self.assertEqual((message.type, sender), (11, '10.0.5.1'))
        message, sender, _ = self.dispatcher.receive(2, 1.0)
        self.assertEqual(sender, '10.0.2.1')

    def test_unquoted_message_goes_to_lowest_ttl(self):
        # given
        self.dispatcher.register(4)
        self.dispatcher.register(3)
        self.dispatcher.start()
        # when
        self._inject(fakes.echo_reply(fakes.DESTINATION))
        # then
        message, sender, _ = self.dispatcher.receive(3, 1.0)
        self.assertEqual(message.type, 0)
        with self.assertRaises(ReceiveTimeout):
            self.dispatcher.receive(4, 0.05)

    def test_failure_reaches_waiting_and_late_receivers(self):
        # given
        dispatcher = ResponseDispatcher(
            FakeListener(self.network, fail_after=0), TARGET, poll_interval=0.01
        )
        dispatcher.register(1)
        # when
        dispatcher.start()
        dispatcher.join(timeout=1.0)
        dispatcher.register(2)
        # then
        self.assertIsInstance(dispatcher.error, ReceiveError)
        with self.assertRaises(ReceiveError):
            dispatcher.receive(1, 1.0)
        with self.assertRaises(ReceiveError):
            dispatcher.receive(2, 1.0)

    def test_stop_ends_thread(self):
        self.dispatcher.start()
        self.dispatcher.stop()
        self.assertFalse(self.dispatcher.is_alive())
        self.assertNotIn(self.dispatcher, threading.enumerate())


class TestDispatchedHopProber(TestCase):
    """
    The dispatcher is not started, deliveries are routed by hand with their receive times.
    """

    def setUp(self):
        self.network = ScriptedNetwork()
        self.dispatcher = ResponseDispatcher(FakeListener(self.network), TARGET)
        self.prober = DispatchedHopProber(
            self.dispatcher, TARGET, FakeTransmitter(self.network),
            wait=WAIT, probes=1, clock=fakes.stepping_clock(start=100.0)
        )
        self.dispatcher.register(3)

    def _deliver(self, reply, received_at):
        self.dispatcher._route(reply.raw, reply.sender, received_at)

    def test_delivery_from_before_the_send_is_not_an_answer(self):
        # given
        self._deliver(fakes.time_exceeded('10.0.3.1', TARGET, 3), received_at=10.0)
        # when
        hop = self.prober.probe_ttl(3)
        # then
        self.assertEqual([it.kind for it in hop.outcomes], [OutcomeKind.TIMEOUT])
        self.assertIsNone(hop.address)

    def test_answer_after_stale_delivery_is_used(self):
        # given
        self._deliver(fakes.time_exceeded('10.0.3.1', TARGET, 3), received_at=10.0)
        self._deliver(fakes.time_exceeded('10.0.3.2', TARGET, 3), received_at=100.2)
        # when
        hop = self.prober.probe_ttl(3)
        # then
        self.assertEqual(hop.address, '10.0.3.2')
        self.assertTrue(hop.outcomes[0].is_success)
        self.assertAlmostEqual(hop.outcomes[0].rtt, 0.2, places=6)
