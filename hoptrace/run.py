#!/usr/bin/env python3
#
# run.py
#

"""
Does the dirty preparation work so that the bootstrap module can act just upon business objects.
"""

import sys

from . import libconstants, config, bootstrap
from . import logsetup
from .model import BusinessException

# setup root logger
log = logsetup.setup_root_logger()
# set log level for scapy => disables warnings
logsetup.set_scapy_loglevel(libconstants.LOG_LVL_SCAPY)


def _prepare_context(argv=None):
    conf = config.AppConfig(argv)
    config.check_limits(conf.probe)
    log.setLevel(conf.log_level)
    wiring = bootstrap.Wiring(conf)
    return conf, wiring


def _run_main(argv=None):
    conf, wiring = _prepare_context(argv)
    bootstrap.run(wiring)


def main(argv=None):
    # noinspection PyBroadException
    try:
        _run_main(argv)
    except BusinessException as e:
        log.error(f'{type(e).__name__}: {e}')
        sys.exit(1)
    except Exception:
        log.exception('Unexpected exception encountered')
        sys.exit(3)


if __name__ == '__main__':
    main()
