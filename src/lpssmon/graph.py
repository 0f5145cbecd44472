""" Render the observed topology as a GraphViz directed graph. Topics are
    drawn as yellow ellipses and nodes as blue boxes; a publisher has an
    edge pointing at its topic, a subscriber has an edge from the topic
    pointing at it.

    The DOT file is the durable artifact. Converting it to an image and
    opening a viewer is attempted in a detached shell whose outcome is
    never checked.
"""

import shlex
import subprocess
import sys

from . import config


def escape(text):
    return str(text).replace('\\', '\\\\').replace('"', '\\"')


def node_id(prefix):
    return 'n%x' % (prefix)


def topic_id(topic):
    return '"t_%s"' % (escape(topic))


def node_label(snapshot, prefix):
    name = snapshot.name(prefix)
    if name is None:
        return '0x%x' % (prefix)
    return name


def to_dot(snapshot):
    """ Return the DOT source describing *snapshot*, a
        :class:`lpssmon.topology.Snapshot`.
    """

    lines = list()
    lines.append('digraph G {')
    lines.append('  rankdir=LR;')
    lines.append('  node [fontname="sans-serif", fontsize=10];')
    lines.append('')

    for topic in snapshot.topic_names():
        line = '  %s [label="%s", shape=ellipse, style=filled, fillcolor=lightyellow];'
        lines.append(line % (topic_id(topic), escape(topic)))

    for prefix in snapshot.node_ids():
        source = node_id(prefix)
        label = escape(node_label(snapshot, prefix))
        lines.append('  %s [label="%s", shape=box, style=filled, fillcolor=lightblue];' % (source, label))

        for endpoint in snapshot.endpoints(prefix):
            target = topic_id(endpoint.topic)
            if endpoint.is_publisher:
                lines.append('  %s -> %s [color=blue, label="pub"];' % (source, target))
            else:
                lines.append('  %s -> %s [color=darkgreen, label="sub"];' % (target, source))

    lines.append('}')
    lines.append('')
    return '\n'.join(lines)



def render(path, image=None, renderer=None, viewer=None):
    """ Launch the external renderer and viewer for the DOT file at *path*
        without waiting for either. Returns the :class:`subprocess.Popen`
        instance, or None if the shell could not be started.
    """

    image = config.image_path if image is None else image
    renderer = config.renderer if renderer is None else renderer
    viewer = config.viewer if viewer is None else viewer

    path = shlex.quote(str(path))
    image = shlex.quote(str(image))

    command = '%s -Tpng %s -o %s && %s %s' % (renderer, path, image, viewer, image)

    devnull = subprocess.DEVNULL

    try:
        return subprocess.Popen(command, shell=True, stdin=devnull,
                                stdout=devnull, stderr=devnull,
                                start_new_session=True)
    except OSError:
        return None



class Exporter:
    """ Write the graph for a :class:`lpssmon.topology.Topology` to *path*
        and hand it to the renderer. Generation happens while the topology
        lock is held, so the file reflects one consistent instant at the
        cost of briefly stalling the discovery threads.
    """

    def __init__(self, topology, path=None, image=None, display=True):

        self.topology = topology
        self.path = config.graph_path if path is None else path
        self.image = config.image_path if image is None else image
        self.display = display


    def write(self, snapshot):
        with open(self.path, 'w', encoding='utf-8') as output:
            output.write(to_dot(snapshot))


    def export(self):
        """ Regenerate the DOT file. Returns True if the file was written;
            a failure to open or write the file is reported and otherwise
            ignored.
        """

        try:
            self.topology.export(self.write)
        except OSError as e:
            print('graph: unable to write %s: %s' % (self.path, e), file=sys.stderr)
            return False

        if self.display:
            render(self.path, self.image)

        return True

    __call__ = export


# end of class Exporter


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
