import logging
import dataclasses as dt

from enum import Enum
from typing import Any, Optional

from . import shell

_logger = logging.getLogger(__name__)


# --- Errors ----------------------------------------------------------------- #


class MinargsError(RuntimeError):
    pass


class UsageError(MinargsError):
    pass


class UnknownOptionError(MinargsError):
    def __init__(self, name: str):
        super().__init__(f"Unknown option '{name}'")
        self.name = name


# --- Options ---------------------------------------------------------------- #


@dt.dataclass(frozen=True)
class Options:
    """
    Configuration of a single parse.

    Attributes:
        alias: Maps a short or alternate name to its canonical name.
        recursive: Treat a bare "--" as a positional instead of stopping.
        positionalValues: Let a flag consume the following token as its value.
        known: Option names that are expected.
        strict: Reject options that are not in `known`.
        multiple: Options whose `values` entry keeps every occurrence.
    """

    alias: dict[str, str] = dt.field(default_factory=dict)
    recursive: bool = False
    positionalValues: bool = False
    known: list[str] = dt.field(default_factory=list)
    strict: bool = False
    multiple: list[str] = dt.field(default_factory=list)

    @staticmethod
    def fromDict(d: dict[str, Any]) -> "Options":
        """
        Builds options from a plain mapping.

        Missing or None fields take their default. Unknown keys and values of
        the wrong shape raise a `UsageError`.
        """
        names = {f.name for f in dt.fields(Options)}
        for key in d.keys():
            if key not in names:
                raise UsageError(f"Unknown configuration field '{key}'")

        fields: dict[str, Any] = {k: v for k, v in d.items() if v is not None}

        alias = fields.get("alias", {})
        if not isinstance(alias, dict) or not all(
            isinstance(k, str) and (v is None or isinstance(v, str))
            for k, v in alias.items()
        ):
            raise UsageError(f"Expected 'alias' to map names to names, got {alias!r}")

        for key in ("known", "multiple"):
            value = fields.get(key, [])
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(v, str) for v in value
            ):
                raise UsageError(f"Expected '{key}' to be a list of names, got {value!r}")
            fields[key] = list(value)

        for key in ("recursive", "positionalValues", "strict"):
            if key in fields:
                fields[key] = bool(fields[key])

        return Options(**fields)

    def resolve(self, name: str) -> str:
        return self.alias.get(name) or name

    def isKnown(self, name: str) -> bool:
        return name in self.known

    def isMultiple(self, name: str) -> bool:
        return name in self.multiple


# --- Result ----------------------------------------------------------------- #


class ItemKind(Enum):
    PROCESS = "process"
    ARGUMENT = "argument"
    SHORT = "short"
    POSITIONAL = "positional"
    VALUE = "value"


@dt.dataclass
class Item:
    """
    One elementary token consumed by the scanner.

    Attributes:
        index: Position of the token in the input.
        kind: How the token was classified.
        value: The raw token, or a {name, value} pair for flags.
    """

    index: int
    kind: ItemKind
    value: str | dict[str, str]

    def toJson(self) -> dict[str, Any]:
        return {"index": self.index, "type": self.kind.value, "value": self.value}


@dt.dataclass
class Result:
    args: dict[str, list[str]] = dt.field(default_factory=dict)
    exists: dict[str, bool] = dt.field(default_factory=dict)
    values: dict[str, str | list[str]] = dt.field(default_factory=dict)
    positionals: list[str] = dt.field(default_factory=list)
    remainder: list[str] = dt.field(default_factory=list)
    argv: list[Item] = dt.field(default_factory=list)

    def trace(self, index: int, kind: ItemKind, value: str | dict[str, str]):
        self.argv.append(Item(index, kind, value))

    def toJson(self) -> dict[str, Any]:
        return {
            "args": self.args,
            "exists": self.exists,
            "values": self.values,
            "positionals": self.positionals,
            "remainder": self.remainder,
            "argv": [item.toJson() for item in self.argv],
        }


# --- Parser ----------------------------------------------------------------- #


class _Parser:
    _opts: Options
    _res: Result

    def __init__(self, opts: Options):
        self._opts = opts
        self._res = Result()

        for name in opts.known:
            self._res.args[name] = []
            self._res.exists[name] = False
            self._res.values[name] = [] if opts.isMultiple(name) else ""

    def store(self, index: int, kind: ItemKind, name: str, value: str = ""):
        """Records an occurrence of an option, resolving its alias first."""
        canonical = self._opts.resolve(name)

        if self._opts.strict and not self._opts.isKnown(canonical):
            raise UnknownOptionError(canonical)

        self._res.args.setdefault(canonical, []).append(value)
        self._res.exists[canonical] = True
        if self._opts.isMultiple(canonical):
            self._res.values[canonical] = list(self._res.args[canonical])
        else:
            self._res.values[canonical] = value

        self._res.trace(index, kind, {"name": name, "value": value})

    def process(self, index: int, arg: str):
        self._res.trace(index, ItemKind.PROCESS, arg)

    def positional(self, index: int, arg: str):
        self._res.positionals.append(arg)
        self._res.trace(index, ItemKind.POSITIONAL, arg)

    def run(self, argv: list[str], start: int) -> Result:
        i = start
        while i < len(argv):
            arg = argv[i]

            if not arg.startswith("-") or arg == "-":
                self.positional(i, arg)
                i += 1
                continue

            if arg == "--":
                if self._opts.recursive:
                    self.positional(i, arg)
                    i += 1
                    continue
                self._res.trace(i, ItemKind.POSITIONAL, arg)
                self._res.remainder = argv[i + 1 :]
                _logger.debug(f"Stopped at '--', {len(self._res.remainder)} left")
                return self._res

            if arg[1] != "-":
                kind = ItemKind.SHORT
                arg = self._expandShorts(i, arg[1:])
            else:
                kind = ItemKind.ARGUMENT
                arg = arg[2:]

            if "=" in arg:
                name, value = arg.split("=", 1)
                self.store(i, kind, name, value)
            elif (
                self._opts.positionalValues
                and i + 1 < len(argv)
                and not argv[i + 1].startswith("-")
            ):
                self.store(i, kind, arg, argv[i + 1])
                i += 1
                self._res.trace(i, ItemKind.VALUE, argv[i])
            else:
                self.store(i, kind, arg)

            i += 1

        return self._res

    def _expandShorts(self, index: int, arg: str) -> str:
        """
        Stores every short flag of a bundle but the last one, and returns the
        last one (with its "=value" suffix, if any) for value resolution.
        """
        shorts, eq, value = arg.partition("=")
        for short in shorts[:-1]:
            self.store(index, ItemKind.SHORT, short)
        return shorts[-1:] + eq + value


def _coerce(argv: list[Any] | tuple[Any, ...]) -> list[str]:
    return [arg if isinstance(arg, str) else str(arg) for arg in argv]


def parse(
    argv: Any,
    opts: Optional[Options] = None,
    *,
    start: int = 0,
    prefix: Optional[list[str]] = None,
) -> Result:
    """
    Tokenizes a list of command-line arguments.

    Args:
        argv: The arguments to parse. Anything other than a list or a tuple
            yields an empty result (or a `UsageError` in strict mode).
        opts: The parser configuration.
        start: Index of the first user-supplied argument in `argv`.
        prefix: Arguments before `start` to record as process items.

    Returns:
        The classified arguments along with a trace of every token.

    Raises:
        UsageError: In strict mode, when `argv` is not a list or a tuple.
        UnknownOptionError: In strict mode, when an option isn't known.
    """
    opts = opts or Options()

    if not isinstance(argv, (list, tuple)):
        if opts.strict:
            raise UsageError(f"Expected a list of arguments, got {type(argv).__name__}")
        _logger.debug(f"Ignoring arguments of type {type(argv).__name__}")
        return Result()

    parser = _Parser(opts)
    for i, arg in enumerate(prefix or []):
        parser.process(i, arg)

    return parser.run(_coerce(argv), start)


def parseProcess(opts: Optional[Options] = None) -> Result:
    """Tokenizes the arguments the current process was invoked with."""
    argv = shell.processArgv()
    start = shell.mainArgs()
    _logger.debug(f"Parsing process arguments from offset {start}: {argv}")
    return parse(argv, opts, start=start, prefix=argv[:start])
