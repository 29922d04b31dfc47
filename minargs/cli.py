import sys
import json
import logging
import dataclasses as dt

from typing import Optional, TextIO

from . import args, const, logger, shell, utils, vt100

_logger = logging.getLogger(__name__)


@dt.dataclass
class Flag:
    """
    A flag understood by the command-line tool.

    Attributes:
        longName: The long name of the flag (e.g., "known" for "--known").
        shortName: The short name of the flag (e.g., "k" for "-k").
        usage: An example invocation.
        description: A description of the flag.
        multiple: True if the flag can be given more than once.
    """

    longName: str
    shortName: Optional[str]
    usage: str
    description: str
    multiple: bool = False


FLAGS: list[Flag] = [
    Flag(
        "args",
        None,
        f'{const.ARGV0} --args="<string of arguments>"',
        "The string of arguments to be parsed",
    ),
    Flag(
        "multiple",
        "m",
        f"{const.ARGV0} --multiple <option>",
        "Define an argument that should support multiples",
        multiple=True,
    ),
    Flag(
        "alias",
        "a",
        f"{const.ARGV0} --alias <alias>:<option>",
        "Define an alias between two option names",
        multiple=True,
    ),
    Flag(
        "known",
        "k",
        f"{const.ARGV0} --known <option>",
        "Define an option that is expected",
        multiple=True,
    ),
    Flag(
        "strict",
        "s",
        f"{const.ARGV0} --known <option> --strict",
        "Default: false - Define whether unknown options should error (use alongside `--known`)",
    ),
    Flag(
        "positionalValues",
        "p",
        f"{const.ARGV0} --positionalValues",
        "Default: false - Define whether to capture positional values",
    ),
    Flag(
        "recursive",
        "r",
        f"{const.ARGV0} --recursive",
        "Default: false - Define whether '--' is kept as a positional",
    ),
    Flag(
        "verbose",
        "v",
        f"{const.ARGV0} --verbose",
        "Enable verbose logging",
    ),
    Flag(
        "help",
        "h",
        f"{const.ARGV0} --help",
        "Display usage information",
    ),
]

COLUMNS = [28, 40, 50]


def options() -> args.Options:
    """Returns the options used to parse the tool's own flags."""
    return args.Options(
        alias={f.shortName: f.longName for f in FLAGS if f.shortName},
        known=[f.longName for f in FLAGS],
        multiple=[f.longName for f in FLAGS if f.multiple],
        strict=True,
        positionalValues=True,
    )


def fill(columns: list[int], row: list[str]) -> str:
    return " ".join(value.ljust(width) for width, value in zip(columns, row)).rstrip()


def usage(out: Optional[TextIO] = None):
    """Prints the usage table."""
    out = out or sys.stdout
    print("Usage:", file=out)
    print(file=out)
    print(f'  {const.ARGV0} --args="<arguments to be parsed>" [<options>]', file=out)
    print(file=out)
    print("  or...", file=out)
    print(file=out)
    print(f'  echo "<arguments to be parsed>" | {const.ARGV0} [<options>]', file=out)
    print(file=out)
    print(fill(COLUMNS, ["Options:", "Usage:", "Description:"]), file=out)
    print(file=out)
    for flag in FLAGS:
        alias = f"-{flag.shortName}, " if flag.shortName else ""
        row = [f"  {alias}--{flag.longName}", flag.usage, flag.description]
        print(fill(COLUMNS, row), file=out)


def buildOptions(res: args.Result) -> args.Options:
    """Turns the tool's own flags into options for parsing the user's input."""
    alias: dict[str, str] = {}
    for pair in utils.asList(res.values["alias"]):
        name, sep, target = pair.partition(":")
        if not sep or not name or not target:
            raise args.UsageError(f"Expected '<alias>:<option>' but got '{pair}'")
        alias[name] = target

    return args.Options(
        alias=alias,
        known=utils.compact(res.values["known"]),
        multiple=utils.compact(res.values["multiple"]),
        strict=res.exists["strict"],
        positionalValues=res.exists["positionalValues"],
        recursive=res.exists["recursive"],
    )


def readInput(res: args.Result, stdin: TextIO) -> Optional[list[str]]:
    """Returns the arguments to parse, from `--args` or else from stdin."""
    if res.exists["args"]:
        return shell.split(utils.asStr(res.values["args"]))

    if stdin.isatty():
        return None

    return shell.split(stdin.read())


def exec(argv: Optional[list[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """
    Runs the command-line tool.

    Args:
        argv: The tool's own arguments, defaults to the process arguments.
        stdin: Where to read arguments from when `--args` isn't given.

    Returns:
        The process exit code.
    """
    stdin = stdin or sys.stdin
    opts = options()
    res = args.parseProcess(opts) if argv is None else args.parse(argv, opts)

    logger.setup(res.exists["verbose"])
    _logger.debug(f"Flags: {res.values}")

    if res.exists["help"]:
        usage()
        return 0

    for operand in res.positionals + res.remainder:
        vt100.warning(f"Ignoring unexpected operand '{operand}'")

    userOpts = buildOptions(res)
    userArgv = readInput(res, stdin)

    if userArgv is None:
        vt100.error("Usage error: no args passed")
        usage()
        return 1

    _logger.info(f"Parsing {userArgv} with {userOpts}")
    result = args.parse(userArgv, userOpts)
    print(json.dumps(result.toJson(), indent=2))
    return 0
