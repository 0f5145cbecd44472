""" Line-oriented operator interface. Commands are case-sensitive and take
    at most one argument; anything unrecognized, including a blank line, is
    silently ignored.

        list            print the name of every known node
        info <name>     print the endpoints of the node(s) named <name>
        graph           write the topology graph and try to display it
        quit            stop the monitor; end of input does the same
"""

import sys

banner = 'LPSS Async Monitor running. Commands: list, info <name>, graph, quit'
prompt = '> '


class Console:
    """ Read commands from *input* and write responses to *output*. Node
        data comes from a :class:`lpssmon.topology.Topology`; *graph* is any
        callable that produces the graph export. *on_quit* is invoked once,
        with no arguments, when the command loop ends.
    """

    def __init__(self, topology, graph=None, input=None, output=None, on_quit=None):

        self.topology = topology
        self.graph = graph
        self.input = sys.stdin if input is None else input
        self.output = sys.stdout if output is None else output
        self.on_quit = on_quit
        self.terminated = False

        self.commands = dict()
        self.commands['list'] = self.do_list
        self.commands['info'] = self.do_info
        self.commands['graph'] = self.do_graph
        self.commands['quit'] = self.do_quit


    def write(self, line):
        self.output.write(line + '\n')


    def do_list(self, argument):
        for name in self.topology.snapshot().names():
            self.write('- ' + name)


    def do_info(self, argument):
        if argument is None:
            return

        for endpoint in self.topology.snapshot().lookup(argument):
            self.write('  [%s] %s' % (endpoint.role.value, endpoint.topic))


    def do_graph(self, argument):
        if self.graph is not None:
            self.graph()


    def do_quit(self, argument):
        self.terminate()


    def dispatch(self, line):
        """ Execute a single command *line*. Returns False once the console
            has terminated, True otherwise.
        """

        if self.terminated:
            return False

        tokens = line.split()
        if len(tokens) == 0:
            return True

        command = tokens[0]
        argument = tokens[1] if len(tokens) > 1 else None

        try:
            method = self.commands[command]
        except KeyError:
            return True

        method(argument)
        return not self.terminated


    def terminate(self):
        if self.terminated:
            return

        self.terminated = True
        self.topology.stop()

        if self.on_quit is not None:
            self.on_quit()


    def run(self):
        """ Process commands until ``quit`` or end of input.
        """

        self.write(banner)

        while not self.terminated:
            self.output.write(prompt)
            self.output.flush()

            line = self.input.readline()
            if line == '':
                break

            self.dispatch(line)

        self.terminate()


# end of class Console


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
