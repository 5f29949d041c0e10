# libconstants.py
#


"""
Holds project wide constants.
"""

# probing defaults, mirrored by the command line flags
PACKET_SIZE = 40  # bytes of UDP payload
FIRST_TTL = 1
MAX_TTL = 64  # number of TTLs to probe, not the last TTL
BASE_PORT = 33434  # destination port is BASE_PORT + ttl
WAIT_TIMEOUT = 5  # seconds
PROBES_PER_TTL = 3
PARALLEL_WINDOW = 1  # 1 = sequential sweep

# limits of the IPv4/UDP header fields
TTL_LIMIT = 255
PORT_LIMIT = 65535

# ICMP types (RFC 792)
ICMP_ECHO_REPLY = 0
ICMP_DEST_UNREACHABLE = 3
ICMP_TIME_EXCEEDED = 11

# poll interval of the response dispatcher in parallel mode, seconds
DISPATCH_POLL_INTERVAL = 0.1

LOG_FORMAT = '%(asctime)s - %(module)s - %(levelname)s: %(message)s'
LOG_LVL_SCAPY = 40  # logging.ERROR

# report markers
MISSING_MARKER = '*'
