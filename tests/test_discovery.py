import socket
import time

import pytest

import lpssmon
from lpssmon import protocol
from lpssmon.discovery import EndpointListener, Heartbeat, NodeListener
from lpssmon.protocol import endpoint, node
from lpssmon.topology import EndpointInfo, Role

from conftest import eventually


def announce(guid, topic, writer=True):
    kind = endpoint.EndpointType.WRITER if writer else endpoint.EndpointType.READER
    return endpoint.EndpointMessage(guid, kind, topic, 'StringMsg').serialize()


@pytest.fixture
def endpoints(topology):
    listener = EndpointListener(topology, '127.0.0.1')

    yield listener

    topology.stop()
    listener.wake()
    listener.join(2)


@pytest.fixture
def nodes(topology):
    try:
        listener = NodeListener(topology, '239.255.0.5', 0)
    except lpssmon.transport.TransportPortError as e:
        pytest.skip('no multicast support: ' + str(e))

    yield listener

    topology.stop()
    listener.wake()
    listener.join(2)


def test_endpoint_handle(topology, endpoints):

    writer = protocol.Guid.make(0x77, entity=1)
    reader = protocol.Guid.make(0x77, entity=2)

    endpoints.handle(announce(writer, 'odom'), None)
    endpoints.handle(announce(writer, 'odom'), None)
    endpoints.handle(announce(reader, 'cmd_vel', writer=False), None)

    found = topology.snapshot().endpoints(0x77)
    assert found == (EndpointInfo('odom', Role.PUBLISHER),
                     EndpointInfo('cmd_vel', Role.SUBSCRIBER))


def test_endpoint_handle_discards_noise(topology, endpoints):

    good = announce(protocol.Guid(9), 'topic')
    node_announcement = node.NodeMessage(9, 'name').serialize()

    endpoints.handle(b'', None)
    endpoints.handle(good[:13], None)
    endpoints.handle(b'X' + good[1:], None)
    endpoints.handle(good[:16], None)
    endpoints.handle(node_announcement, None)

    snapshot = topology.snapshot()
    assert snapshot.nodes == {}
    assert snapshot.topics == {}


def test_node_handle(topology, nodes):

    nodes.handle(node.NodeMessage(0xFFFF000000000001, 'camera_node').serialize(), None)
    nodes.handle(node.NodeMessage(0x0000000000000002, 'old_name').serialize(), None)
    nodes.handle(node.NodeMessage(0x0000000000000002, 'new_name').serialize(), None)

    snapshot = topology.snapshot()
    assert snapshot.nodes == {1: 'camera_node', 2: 'new_name'}


def test_node_handle_discards_noise(topology, nodes):

    data = node.NodeMessage(3, 'detector_node', [(1, '10.0.0.1')]).serialize()

    nodes.handle(data[:10], None)
    nodes.handle(b'E' + data[1:], None)
    nodes.handle(data[:-2], None)
    nodes.handle(b'unrelated multicast chatter', None)

    assert topology.snapshot().nodes == {}


def test_endpoint_listener_loopback(topology, endpoints, sender):

    endpoints.start()
    assert endpoints.port != 0

    target = ('127.0.0.1', endpoints.port)
    sender.sendto(b'garbage', target)
    sender.sendto(announce(protocol.Guid.make(0x10, 1), 'scan'), target)

    def arrived():
        return len(topology.snapshot().endpoints(0x10)) == 1

    assert eventually(arrived) == True
    assert endpoints.alive() == True


def test_interruptible_listener_receives(topology, sender):
    """ The default, interruptible listener must record traffic as well as
        respond to wake-ups.
    """

    listener = EndpointListener(topology, '127.0.0.1')
    assert listener.interruptible == True
    listener.start()

    try:
        target = ('127.0.0.1', listener.port)
        sender.sendto(announce(protocol.Guid.make(0x21, 1), 'imu'), target)
        sender.sendto(announce(protocol.Guid.make(0x21, 2), 'cmd', writer=False), target)

        def arrived():
            return len(topology.snapshot().endpoints(0x21)) == 2

        assert eventually(arrived) == True
    finally:
        topology.stop()
        listener.wake()
        listener.join(2)

    assert listener.alive() == False
    assert topology.snapshot().endpoints(0x21) == (EndpointInfo('imu', Role.PUBLISHER),
                                                  EndpointInfo('cmd', Role.SUBSCRIBER))


def test_close_unstarted_listener(topology):

    listener = EndpointListener(topology, '127.0.0.1')
    listener.close()

    assert listener._sig_tx is None
    assert listener._sig_rx is None
    assert listener.socket.fileno() == -1

    # Idempotent.
    listener.close()

def test_wake_stops_a_blocked_listener(topology):

    listener = EndpointListener(topology, '127.0.0.1')
    listener.start()
    time.sleep(0.05)

    topology.stop()
    listener.wake()
    listener.join(2)

    assert listener.alive() == False

    # Redundant wake-ups are harmless.
    listener.wake()


def test_best_effort_listener_waits_for_traffic(topology, sender):
    """ Without the wake-up signal a listener only notices the stop request
        once its pending read returns.
    """

    listener = EndpointListener(topology, '127.0.0.1', interruptible=False)
    listener.start()
    time.sleep(0.05)

    topology.stop()
    listener.wake()
    listener.join(0.2)

    assert listener.alive() == True

    sender.sendto(b'final packet', ('127.0.0.1', listener.port))
    listener.join(2)

    assert listener.alive() == False


def test_heartbeat(topology, receiver):

    port = lpssmon.transport.udp.bound_port(receiver)
    heartbeat = Heartbeat(topology, 45678, '127.0.0.1', group='127.0.0.1',
                          discovery_port=port, interval=0.05)
    heartbeat.start()

    try:
        first, address = receiver.recvfrom(4096)
        second, address = receiver.recvfrom(4096)
    finally:
        topology.stop()
        heartbeat.join(2)

    assert heartbeat.alive() == False
    assert heartbeat.sent >= 2

    message = node.deserialize(first)
    assert message.guid == protocol.Guid(lpssmon.config.identity)
    assert message.name == lpssmon.config.name
    assert message.locators == [node.Locator(45678, '127.0.0.1')]
    assert second == first


def test_heartbeat_uses_advertised_interface(topology):

    heartbeat = Heartbeat(topology, 1, '127.0.0.1', group='127.0.0.1', discovery_port=9)

    try:
        chosen = heartbeat.socket.getsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, 4)
        assert chosen == socket.inet_aton('127.0.0.1')
    finally:
        heartbeat.close()

    assert heartbeat.socket.fileno() == -1

def test_heartbeat_stops_promptly(topology):

    heartbeat = Heartbeat(topology, 1, '127.0.0.1', group='127.0.0.1',
                          discovery_port=9, interval=60)
    heartbeat.start()
    time.sleep(0.05)

    begin = time.time()
    topology.stop()
    heartbeat.join(2)

    assert heartbeat.alive() == False
    assert time.time() - begin < 1

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
