import logging

from typing import Optional

from . import (
    args,
    cli,
    const,
    shell,
    vt100,
)
from .args import (
    Item,
    ItemKind,
    MinargsError,
    Options,
    Result,
    UnknownOptionError,
    UsageError,
    parse,
    parseProcess,
)
from .shell import mainArgs, split

_logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    try:
        return cli.exec(argv)

    except (RuntimeError, ValueError, OSError) as e:
        _logger.debug("Command failed", exc_info=e)
        vt100.error(str(e))
        return 1

    except KeyboardInterrupt:
        print()
        return 1
