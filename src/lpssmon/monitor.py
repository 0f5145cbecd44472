""" Process wiring: resolve the local address, bind the endpoint port,
    start the three discovery threads against a shared topology, and hand
    the foreground to the console.
"""

import sys

from . import config
from . import transport
from .console import Console
from .discovery import EndpointListener, Heartbeat, NodeListener
from .graph import Exporter
from .topology import Topology

shutdown_notice = 'Shutting down...'
best_effort_notice = 'Shutting down... (Waiting for final packets to unblock threads)'


class Monitor:
    """ Owns the :class:`lpssmon.topology.Topology` and the background
        tasks that populate it. Every socket is created by the constructor;
        any failure there raises :class:`lpssmon.transport.TransportPortError`
        before a single thread is started.

        With *best_effort* set, :func:`stop` only clears the running flag,
        and listener threads exit after their next datagram. Otherwise the
        listeners are woken immediately.
    """

    def __init__(self, best_effort=False, address=None, group=None,
                 discovery_port=None, interval=None, graph_path=None,
                 display=True, listen_nodes=True):

        self.best_effort = best_effort
        self.topology = Topology()

        if address is None:
            address = transport.interfaces.local_ipv4()
        self.address = address

        interruptible = not best_effort
        self.tasks = list()

        try:
            self._build(group, discovery_port, interval, interruptible, listen_nodes)
        except transport.TransportError:
            for task in self.tasks:
                task.close()
            raise

        self.exporter = Exporter(self.topology, graph_path, display=display)


    def _build(self, group, discovery_port, interval, interruptible, listen_nodes):

        if listen_nodes:
            self.nodes = NodeListener(self.topology, group, discovery_port, interruptible)
            self.tasks.append(self.nodes)
        else:
            self.nodes = None

        self.endpoints = EndpointListener(self.topology, interruptible=interruptible)
        self.port = self.endpoints.port
        self.tasks.append(self.endpoints)

        self.heartbeat = Heartbeat(self.topology, self.port, self.address,
                                   group=group, discovery_port=discovery_port,
                                   interval=interval)
        self.tasks.append(self.heartbeat)


    def start(self):
        for task in self.tasks:
            task.start()


    def stop(self):
        self.topology.stop()

        if self.best_effort:
            return

        for task in self.tasks:
            task.wake()


    def join(self, timeout=None):
        for task in self.tasks:
            task.join(timeout)


    def console(self, input=None, output=None):
        return Console(self.topology, self.exporter, input, output, on_quit=self.stop)


    def run(self, input=None, output=None):
        """ Start the background tasks and run the console in the calling
            thread until the operator quits.
        """

        self.start()
        console = self.console(input, output)
        console.run()

        if self.best_effort:
            console.write(best_effort_notice)
        else:
            console.write(shutdown_notice)


# end of class Monitor



def main():

    try:
        monitor = Monitor()
    except transport.TransportError as e:
        print('lpssmon: ' + str(e), file=sys.stderr)
        return 1

    monitor.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
