#!/usr/bin/env python3
# menuconsole/interrupt.py
from __future__ import annotations

"""
Interrupt sentinels.

Handlers are keyed by an explicit sentinel value instead of exception
identity: EOF (Ctrl-D while reading), CTRL_C (Ctrl-C while reading) and
Interrupt.signal(signum) for OS signals caught while a command runs.
"""

import enum
import signal as _signal
from dataclasses import dataclass
from typing import Callable, Optional


class InterruptKind(enum.Enum):
    EOF = "eof"
    CTRL_C = "ctrl-c"
    SIGNAL = "signal"


@dataclass(frozen=True, slots=True)
class Interrupt:
    kind: InterruptKind
    signum: Optional[int] = None

    @classmethod
    def signal(cls, signum: int) -> "Interrupt":
        """Sentinel for an OS signal received during command execution."""
        return cls(InterruptKind.SIGNAL, int(signum))

    @property
    def signal_name(self) -> str:
        if self.signum is None:
            return ""
        try:
            return _signal.Signals(self.signum).name
        except ValueError:
            return f"signal {self.signum}"

    def __str__(self) -> str:
        if self.kind is InterruptKind.SIGNAL:
            return self.signal_name
        return self.kind.value


EOF = Interrupt(InterruptKind.EOF)
CTRL_C = Interrupt(InterruptKind.CTRL_C)

# Handlers receive the console that caught the interrupt.
InterruptHandler = Callable[..., None]
