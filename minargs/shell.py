import re
import sys
import logging

from typing import Optional

_logger = logging.getLogger(__name__)


# --- Splitting -------------------------------------------------------------- #

# A run of unquoted characters and quoted strings with no whitespace between
# them. Quotes are matched by backreference so "it's" and 'say "hi"' stay whole.
_WORD = re.compile(r"""(?:[^\s'"]|(['"]).*?\1)+""", re.DOTALL)

_FRAGMENT = re.compile(r"""(?P<q>['"])(?P<quoted>.*?)(?P=q)|(?P<bare>[^'"]+)""", re.DOTALL)


def _unquote(word: str) -> str:
    res = ""
    for match in _FRAGMENT.finditer(word):
        if match.group("q"):
            res += match.group("quoted")
        else:
            res += match.group("bare")
    return res


def split(text: str) -> list[str]:
    """
    Splits a command string into arguments, the way a shell would for simple
    input.

    Whitespace outside of quotes separates arguments. Single and double quoted
    strings are taken verbatim, without any escape processing, and fragments
    that touch each other are joined into a single argument. Unterminated
    quotes are tolerated: whatever can't be matched is skipped.

    Args:
        text: The command string.

    Returns:
        The list of arguments.
    """
    res = [_unquote(match.group(0)) for match in _WORD.finditer(text)]
    _logger.debug(f"split: {text!r} -> {res}")
    return res


# --- Process arguments ------------------------------------------------------ #

# Interpreter options after which user arguments directly follow the executable.
INLINE_FLAGS = ["-c"]


def _isFrozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def _isInline() -> bool:
    return len(sys.argv) > 0 and sys.argv[0] == "-c"


def _origArgv() -> list[str]:
    orig = getattr(sys, "orig_argv", None)
    if not orig:
        return [sys.executable] + sys.argv
    return list(orig)


def execArgv() -> list[str]:
    """Returns the options given to the interpreter itself."""
    orig = _origArgv()
    end = len(orig) - (len(sys.argv) - 1)
    if not _isInline():
        # drop the script (or module) name
        end -= 1
    return orig[1 : max(end, 1)]


def processArgv() -> list[str]:
    """
    Returns the live invocation vector: the executable, the script (unless
    the code was given inline or the program is a frozen bundle), then the
    user arguments.
    """
    if _isFrozen():
        return list(sys.argv)

    exe = _origArgv()[0] or sys.executable
    if _isInline():
        return [exe] + sys.argv[1:]
    return [exe] + sys.argv


def mainArgs(
    interpreterArgs: Optional[list[str]] = None, frozen: Optional[bool] = None
) -> int:
    """
    Works out where user supplied arguments start in `processArgv()`.

    Args:
        interpreterArgs: The interpreter options, defaults to `execArgv()`.
        frozen: Whether the program runs from a frozen bundle, detected when
            not given.

    Returns:
        1 when the arguments directly follow the executable, 2 otherwise.
    """
    if frozen is None:
        frozen = _isFrozen()

    # A bundled executable has no separate script entry.
    if frozen:
        return 1

    if interpreterArgs is None:
        interpreterArgs = execArgv()

    if any(flag in INLINE_FLAGS for flag in interpreterArgs):
        return 1

    return 2
