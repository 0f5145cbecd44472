""" Fixed parameters for the monitor. There is no configuration file and no
    environment lookup; every value here is a build-time constant. The
    classes that consume these values accept keyword overrides, which is
    how the unit tests point them at private ports and paths.
"""

# Every LPSS participant listens to this group/port pair for node
# announcements. Changing either value isolates the monitor from the
# network it is meant to observe.

discovery_group = '239.255.0.5'
discovery_port = 7500

# Identity advertised by the heartbeat. Only the low 48 bits matter to
# peers, see lpssmon.protocol.guid.prefix().

identity = 0x12345678
name = 'lpss_inspector'

# Seconds between heartbeats.

heartbeat_interval = 1

multicast_ttl = 1
receive_size = 65536

graph_path = 'lpss_graph.dot'
image_path = 'lpss_graph.png'
renderer = 'dot'
viewer = 'xdg-open'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
