""" The shared, in-memory view of the observed LPSS network. A single
    :class:`Topology` instance is populated by the background discovery
    threads and read by the console and the graph exporter. All access to
    the node and topic maps goes through the methods here, each of which
    holds the store-wide lock; readers receive a :class:`Snapshot` copy
    rather than a reference to the live maps.
"""

import enum
import threading


class Role(enum.Enum):
    PUBLISHER = 'PUB'
    SUBSCRIBER = 'SUB'


class EndpointInfo:
    """ One advertised capability: the *topic* name and whether the owning
        node publishes or subscribes to it.
    """

    __slots__ = ('topic', 'role')

    def __init__(self, topic, role):
        self.topic = topic
        self.role = Role(role)


    @property
    def is_publisher(self):
        return self.role is Role.PUBLISHER


    def __eq__(self, other):
        if isinstance(other, EndpointInfo):
            return self.topic == other.topic and self.role is other.role
        return NotImplemented


    def __hash__(self):
        return hash((self.topic, self.role))


    def __repr__(self):
        return 'EndpointInfo(%r, %s)' % (self.topic, self.role.name)


# end of class EndpointInfo



class Snapshot:
    """ A consistent, read-only copy of a :class:`Topology`. The *nodes*
        mapping goes from 48-bit node id to name; *topics* goes from node id
        to a tuple of :class:`EndpointInfo` in the order they were first
        seen. A node id may be present in *topics* without a name.
    """

    def __init__(self, nodes, topics):
        self.nodes = nodes
        self.topics = topics


    def name(self, node_id):
        """ Return the name for *node_id*, or None if it has not announced
            itself yet.
        """

        return self.nodes.get(node_id)


    def names(self):
        return list(self.nodes.values())


    def node_ids(self):
        """ Every known node id, named or not. Named nodes come first, in
            the store's iteration order.
        """

        ids = list(self.nodes)
        for node_id in self.topics:
            if node_id not in self.nodes:
                ids.append(node_id)
        return ids


    def endpoints(self, node_id):
        return self.topics.get(node_id, ())


    def lookup(self, name):
        """ Return the endpoints of every node whose name is exactly *name*,
            concatenated in node iteration order. An unknown name yields an
            empty list.
        """

        found = list()
        for node_id, node_name in self.nodes.items():
            if node_name == name:
                found.extend(self.endpoints(node_id))
        return found


    def topic_names(self):
        """ The sorted set of distinct topic names across all nodes.
        """

        topics = set()
        for endpoints in self.topics.values():
            for endpoint in endpoints:
                topics.add(endpoint.topic)
        return sorted(topics)


    def __len__(self):
        return len(self.node_ids())


# end of class Snapshot



class Topology:
    """ Node names and per-node endpoint lists, guarded by one lock. The
        maps themselves are private; use :func:`record_node`,
        :func:`record_endpoint`, :func:`snapshot`, and :func:`export` to
        touch them.

        The *running* flag starts True and is cleared exactly once, by
        :func:`stop`. Background loops check it on every iteration, and may
        block on :func:`wait` to sleep until either a timeout elapses or the
        flag is cleared.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._nodes = dict()
        self._topics = dict()
        self._seen = dict()
        self._stopped = threading.Event()


    @property
    def running(self):
        return not self._stopped.is_set()


    def stop(self):
        """ Clear the running flag. This does not interrupt any thread that
            is currently blocked on a network read.
        """

        self._stopped.set()


    def wait(self, timeout):
        """ Sleep for up to *timeout* seconds, returning early if
            :func:`stop` is called. Returns True if the store is stopped.
        """

        return self._stopped.wait(timeout)


    def record_node(self, node_id, name):
        """ Set the name for *node_id*. The most recent announcement wins.
        """

        with self._lock:
            self._nodes[node_id] = name


    def record_endpoint(self, node_id, topic, is_publisher):
        """ Append (*topic*, role) to the endpoint list for *node_id* unless
            that exact pair is already present. Returns True if the list
            changed.
        """

        role = Role.PUBLISHER if is_publisher else Role.SUBSCRIBER
        endpoint = EndpointInfo(topic, role)

        with self._lock:
            seen = self._seen.setdefault(node_id, set())
            if endpoint in seen:
                return False

            seen.add(endpoint)
            self._topics.setdefault(node_id, list()).append(endpoint)

        return True


    def _copy(self):
        topics = dict()
        for node_id, endpoints in self._topics.items():
            topics[node_id] = tuple(endpoints)

        return Snapshot(dict(self._nodes), topics)


    def snapshot(self):
        """ Return a :class:`Snapshot` reflecting every mutation completed
            before the call.
        """

        with self._lock:
            return self._copy()


    def export(self, method):
        """ Invoke *method* with a :class:`Snapshot` while still holding the
            lock, and return its result. Discovery threads stall until
            *method* returns; this keeps long-running output, such as the
            graph file, consistent with a single instant of the store.
        """

        with self._lock:
            return method(self._copy())


    def __len__(self):
        with self._lock:
            return len(self._copy())


    def __repr__(self):
        return 'topology.Topology: ' + repr(self.snapshot().nodes)


# end of class Topology


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
