from .model import AppConfig, ProbeConfig, ScheduleConfig, OutputConfig
from .util import print_usage_and_exit, check_limits
