"""Command-line option parser with short and long options, getopt style."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence


@dataclass(frozen=True)
class LongOption:
    """A ``--name`` option.

    ``val`` is what the parser returns for it. When ``flag`` is given, it is
    called with ``val`` instead and the parser returns an empty string.
    """

    name: str
    has_arg: bool
    val: str
    flag: Optional[Callable[[str], None]] = None


class GetOptLong:
    """Parse ``argv`` (including the program name) option by option."""

    BADCH = "?"
    BADARG = ":"

    def __init__(
        self,
        argv: Sequence[str],
        optstring: str,
        longopts: Sequence[LongOption] = (),
        opterr: bool = False,
    ) -> None:
        self.argv = list(argv)
        self.optstring = optstring
        self.longopts = list(longopts)
        self.opterr = opterr
        self.optind = 1
        self.optopt = ""
        self.longindex = -1
        self.optarg: Optional[str] = None
        self._place = ""

    def _report(self, message: str) -> None:
        if self.opterr:
            program = self.argv[0] if self.argv else ""
            print(f"{program}: {message}")

    def _long_option(self) -> str:
        text = self._place[1:]
        name, equals, value = text.partition("=")
        for index, option in enumerate(self.longopts):
            if option.name != name:
                continue
            if option.has_arg:
                if equals:
                    self.optarg = value
                elif self.optind < len(self.argv) - 1:
                    self.optind += 1
                    self.optarg = self.argv[self.optind]
                else:
                    self._place = ""
                    self.optind += 1
                    if self.optstring.startswith(":"):
                        return self.BADARG
                    self._report(f"option requires an argument -- {text}")
                    return self.BADCH
            else:
                self.optarg = None
            self.optind += 1
            self.longindex = index
            self._place = ""
            if option.flag is None:
                return option.val
            option.flag(option.val)
            return ""
        if not self.optstring.startswith(":"):
            self._report(f"illegal option -- {text}")
        self._place = ""
        self.optind += 1
        return self.BADCH

    def getoption(self) -> Optional[str]:
        """Return the next option character, ``?``/``:`` on error, or None at the end."""
        if not self._place:
            if self.optind >= len(self.argv):
                return None
            arg = self.argv[self.optind]
            if not arg.startswith("-") or arg == "-":
                return None
            self._place = arg[1:]
            if self._place == "-":
                self.optind += 1
                self._place = ""
                return None
            if self._place.startswith("-"):
                return self._long_option()

        self.optopt, self._place = self._place[0], self._place[1:]
        position = self.optstring.find(self.optopt) if self.optopt != ":" else -1
        if position < 0:
            if not self._place:
                self.optind += 1
            if not self.optstring.startswith(":"):
                self._report(f"illegal option -- {self.optopt}")
            return self.BADCH

        if self.optstring[position + 1 : position + 2] != ":":
            self.optarg = None
            if not self._place:
                self.optind += 1
        else:
            if self._place:
                self.optarg = self._place
            else:
                self.optind += 1
                if len(self.argv) <= self.optind:
                    self._place = ""
                    if self.optstring.startswith(":"):
                        return self.BADARG
                    self._report(f"option requires an argument -- {self.optopt}")
                    return self.BADCH
                self.optarg = self.argv[self.optind]
            self._place = ""
            self.optind += 1
        return self.optopt

    def __iter__(self) -> Iterator[tuple[str, Optional[str]]]:
        """Yield ``(option, argument)`` pairs until the options end."""
        while (option := self.getoption()) is not None:
            yield option, self.optarg