"""Gates and terminals: the airport's parking resources."""

from towersim.ground.gate import Gate, NoSpaceError
from towersim.ground.terminal import MAX_NUM_GATES, NoSuitableGateError, Terminal, TerminalKind

__all__ = [
    "MAX_NUM_GATES",
    "Gate",
    "NoSpaceError",
    "NoSuitableGateError",
    "Terminal",
    "TerminalKind",
]
