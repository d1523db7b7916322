"""
clusterkube/kubeconfig/confirm.py

Interactive yes/no confirmation. The installer takes any
`Callable[[str], bool]`, so tests and non-interactive callers can pass their
own.
"""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

ConfirmProvider = Callable[[str], bool]


def is_affirmative(answer: str) -> bool:
    """True if the answer contains `y` or `Y` anywhere."""
    return any(ch in answer for ch in "yY")


def prompt_confirmation(
    prompt: str,
    stream_in: Optional[TextIO] = None,
    stream_out: Optional[TextIO] = None,
) -> bool:
    """
    Print `prompt` and read one line. End of input counts as "no".
    """
    stream_in = stream_in or sys.stdin
    stream_out = stream_out or sys.stderr

    stream_out.write(prompt)
    stream_out.flush()
    answer = stream_in.readline()
    return is_affirmative(answer)
