from . import const
from .exception import *
from .hop import HopResult, TraceReport
from .icmp import IcmpMessage
from .probe import ProbeTarget, ProbeAttempt, ProbeOutcome

"""
Defines shared model classes over all layers.
"""
