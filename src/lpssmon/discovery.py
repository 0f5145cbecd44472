""" Background threads that observe LPSS discovery traffic and feed a
    :class:`lpssmon.topology.Topology`:

    * :class:`NodeListener` joins the discovery multicast group and records
      node names from node announcements.
    * :class:`EndpointListener` owns the unicast port advertised in our
      heartbeat, and records the topics peers publish or subscribe to.
    * :class:`Heartbeat` periodically multicasts our own node announcement
      so that quiet peers answer with their endpoint announcements.

    Each class creates its socket in the constructor, so a port or group
    that cannot be acquired is reported to the caller before any thread
    starts. Each socket is used only by the thread of the instance that
    created it.
"""

import itertools
import sys
import threading
import traceback

import zmq

from . import config
from . import protocol
from .protocol import endpoint
from .protocol import node
from .transport import udp

zmq_context = zmq.Context()
_signal_ids = itertools.count()


class Listener:
    """ Receive loop shared by the two discovery listeners. Subclasses
        implement :func:`handle`, which is invoked once per datagram.

        If *interruptible* is True the loop polls its UDP socket together
        with an inproc signal socket, and :func:`wake` breaks it out of a
        pending read. Otherwise the loop blocks directly on the UDP socket
        and only notices that the topology stopped running after the next
        datagram arrives.
    """

    poll_timeout = 10000

    def __init__(self, topology, socket, interruptible=True, size=None):

        self.topology = topology
        self.socket = socket
        self.size = config.receive_size if size is None else int(size)
        self.interruptible = interruptible
        self.thread = None

        self._sig_rx = None
        self._sig_tx = None

        if interruptible:
            internal = 'inproc://%s:signal:%d' % (type(self).__name__, next(_signal_ids))
            self._sig_rx = zmq_context.socket(zmq.PAIR)
            self._sig_rx.setsockopt(zmq.LINGER, 0)
            self._sig_rx.bind(internal)
            self._sig_tx = zmq_context.socket(zmq.PAIR)
            self._sig_tx.setsockopt(zmq.LINGER, 0)
            self._sig_tx.connect(internal)


    def start(self):
        self.thread = threading.Thread(target=self.run, name=type(self).__name__)
        self.thread.daemon = True
        self.thread.start()


    def wake(self):
        """ Release the receive loop if it is waiting for traffic. Has no
            effect on a non-interruptible listener.
        """

        signal = self._sig_tx
        if signal is None:
            return

        self._sig_tx = None

        try:
            signal.send(b'', flags=zmq.NOBLOCK)
        except zmq.ZMQError:
            # The loop already exited and closed its end.
            pass

        signal.close()

        if self.thread is None and self._sig_rx is not None:
            # Never started; nothing else will close the receiving end.
            self._sig_rx.close()
            self._sig_rx = None


    def close(self):
        """ Release the sockets of a listener that was never started; a
            running listener is woken and closes its own.
        """

        started = self.thread is not None
        self.wake()

        if not started:
            self.socket.close()


    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)


    def alive(self):
        return self.thread is not None and self.thread.is_alive()


    def handle(self, data, address):
        raise NotImplementedError('Listener subclasses must implement handle()')


    def run(self):

        # The poller reports plain sockets by file descriptor, not by object.

        descriptor = self.socket.fileno()
        poller = None
        if self._sig_rx is not None:
            poller = zmq.Poller()
            poller.register(self._sig_rx, zmq.POLLIN)
            poller.register(descriptor, zmq.POLLIN)

        while self.topology.running:
            if poller is not None:
                ready = dict(poller.poll(self.poll_timeout))
                if self._sig_rx in ready:
                    break
                if descriptor not in ready:
                    continue

            try:
                data, address = self.socket.recvfrom(self.size)
            except OSError:
                # Socket closed underneath us.
                break

            try:
                self.handle(data, address)
            except Exception:
                traceback.print_exc()

        self.cleanup()


    def cleanup(self):

        try:
            self.socket.close()
        except OSError:
            pass

        if self._sig_rx is not None:
            self._sig_rx.close()
            self._sig_rx = None


# end of class Listener



class NodeListener(Listener):
    """ Listen on the well-known discovery group for node announcements.
        Anything that is not a well-formed node announcement is dropped
        without comment; the group is shared with unrelated traffic.
    """

    def __init__(self, topology, group=None, port=None, interruptible=True):

        self.group = config.discovery_group if group is None else group
        self.port = config.discovery_port if port is None else int(port)

        sock = udp.multicast_listener(self.group, self.port)
        Listener.__init__(self, topology, sock, interruptible)


    def handle(self, data, address):

        if not protocol.tagged(data, node.tag):
            return

        try:
            message = node.deserialize(data)
        except protocol.DecodeError:
            return

        self.topology.record_node(protocol.prefix(message.guid), message.name)


# end of class NodeListener



class EndpointListener(Listener):
    """ Receive endpoint announcements on a unicast port. The port is bound
        when the instance is created and is available as :attr:`port`, so
        that it can be advertised by a :class:`Heartbeat` before this
        listener starts.
    """

    def __init__(self, topology, address='', port=0, interruptible=True):

        sock = udp.unicast_listener(address, port)
        self.port = udp.bound_port(sock)
        Listener.__init__(self, topology, sock, interruptible)


    def handle(self, data, address):

        if not protocol.tagged(data, endpoint.tag):
            return

        try:
            message = endpoint.deserialize(data)
        except protocol.DecodeError:
            return

        node_id = protocol.prefix(message.endpoint_guid)
        is_publisher = message.type == endpoint.EndpointType.WRITER
        self.topology.record_endpoint(node_id, message.topic, is_publisher)


# end of class EndpointListener



class Heartbeat:
    """ Multicast our node announcement every *interval* seconds, carrying a
        single locator (*port*, *address*) where peers should send their
        endpoint announcements. Sends are fire-and-forget; a lost heartbeat
        is replaced by the next one.
    """

    def __init__(self, topology, port, address, guid=None, name=None,
                 group=None, discovery_port=None, interval=None):

        self.topology = topology
        self.port = int(port)
        self.address = address
        guid = config.identity if guid is None else guid
        self.guid = guid if isinstance(guid, protocol.Guid) else protocol.Guid(guid)
        self.name = config.name if name is None else name
        self.group = config.discovery_group if group is None else group
        self.discovery_port = config.discovery_port if discovery_port is None else int(discovery_port)
        self.interval = config.heartbeat_interval if interval is None else interval

        self.sent = 0
        self.failures = 0
        self.thread = None
        self.socket = udp.sender(config.multicast_ttl, address)


    def announcement(self):
        locators = ((self.port, self.address),)
        return node.NodeMessage(self.guid, self.name, locators)


    def start(self):
        self.thread = threading.Thread(target=self.run, name='Heartbeat')
        self.thread.daemon = True
        self.thread.start()


    def wake(self):
        # The interval wait is released by Topology.stop().
        pass


    def close(self):
        if self.thread is None:
            self.socket.close()


    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)


    def alive(self):
        return self.thread is not None and self.thread.is_alive()


    def beat(self):
        """ Send one announcement. Returns True if it was handed to the
            operating system.
        """

        payload = self.announcement().serialize()

        try:
            self.socket.sendto(payload, (self.group, self.discovery_port))
        except OSError as e:
            self.failures += 1
            if self.failures == 1:
                print('heartbeat: unable to send to %s:%d: %s' % (self.group, self.discovery_port, e), file=sys.stderr)
            return False

        self.sent += 1
        return True


    def run(self):

        while self.topology.running:
            self.beat()
            if self.topology.wait(self.interval):
                break

        self.socket.close()


# end of class Heartbeat


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
