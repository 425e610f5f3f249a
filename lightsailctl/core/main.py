"""
lightsailctl command entry point.
"""

import logging
import re
import sys

from ._log_helper import setup_logging
from .version import VERSION

logger = logging.getLogger(__name__)

PLUGIN_FLAG_RE = re.compile(r"^--?plugin$")
VERSION_FLAG_RE = re.compile(r"^--?version$")


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv if argv is None else argv
    setup_logging()
    progname = argv[0] if argv else "lightsailctl"
    if len(argv) > 1 and PLUGIN_FLAG_RE.match(argv[1]):
        from lightsailctl.plugin import plugin_main

        return plugin_main(f"{progname} {argv[1]}", argv[2:])
    if len(argv) > 1 and VERSION_FLAG_RE.match(argv[1]):
        print(VERSION)
        return 0
    logger.error(
        "%s can't be used directly, it is meant to be invoked by AWS CLI",
        progname,
    )
    return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
