"""Command-line options shared by the image-classification runs."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass


class MatmulType(enum.Enum):
    """Dataflow used for tiled matrix multiplications."""

    OS = "os"
    WS = "ws"
    CPU = "cpu"

    def resadd_type(self) -> MatmulType:
        """Dataflow used for residual additions: CPU stays CPU, anything else is WS."""
        return MatmulType.CPU if self is MatmulType.CPU else MatmulType.WS


class Network(enum.Enum):
    """Networks whose runs accept these options."""

    ALEXNET = "alexnet"
    MOBILENET = "mobilenet"

    @property
    def default_conv(self) -> bool:
        """Whether convolutions run natively when no mode is given."""
        return self is Network.MOBILENET

    @property
    def check_before_conv(self) -> bool:
        """Whether the ``check`` argument comes before the conv/matmul mode."""
        return self is Network.ALEXNET


@dataclass(frozen=True)
class RunOptions:
    """Settings selected on the command line."""

    matmul_type: MatmulType = MatmulType.WS
    check: bool = False
    conv: bool = False


class UsageError(Exception):
    """Raised when the options ask for help or cannot be understood.

    ``exit_code`` is 0 when help was requested and 1 for a bad argument;
    ``message`` is the text to show the user.
    """

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


_UNKNOWN = "Unknown command-line argument\n"


def usage(prog: str, with_conv: bool = False) -> str:
    """Return the usage text for ``prog``."""
    extra = " [conv]" if with_conv else ""
    return (
        f"usage: {prog} [-h] matmul_option [check]{extra}\n"
        "  matmul_option may be 'os', 'ws', or cpu'\n"
    )


def _unknown(prog: str, with_conv: bool) -> UsageError:
    return UsageError(_UNKNOWN + usage(prog, with_conv), 1)


def _parse_matmul(arg: str | None, prog: str) -> MatmulType:
    if arg is None:
        return MatmulType.WS
    if arg == "-h":
        raise UsageError(usage(prog, False), 0)
    try:
        return MatmulType(arg)
    except ValueError:
        raise _unknown(prog, False) from None


def _parse_check(arg: str | None, prog: str) -> bool:
    if arg is None:
        return False
    if arg == "check":
        return True
    raise _unknown(prog, False)


def _parse_conv(arg: str | None, prog: str, default: bool) -> bool:
    if arg is None:
        return default
    if arg == "conv":
        return True
    if arg == "matmul":
        return False
    raise _unknown(prog, True)


def parse_options(argv: Sequence[str], network: Network) -> RunOptions:
    """Parse a full argument vector (program name first) for ``network``.

    Arguments past the third are ignored. Raises :class:`UsageError` for
    ``-h`` or for any argument that is not understood.
    """
    prog = argv[0] if argv else ""
    args = list(argv[1:4]) + [None] * (3 - len(argv[1:4]))
    matmul_type = _parse_matmul(args[0], prog)
    if network.check_before_conv:
        check = _parse_check(args[1], prog)
        conv = _parse_conv(args[2], prog, network.default_conv)
    else:
        conv = _parse_conv(args[1], prog, network.default_conv)
        check = _parse_check(args[2], prog)
    return RunOptions(matmul_type=matmul_type, check=check, conv=conv)