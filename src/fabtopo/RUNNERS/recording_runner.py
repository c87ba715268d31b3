"""
A container runner that records commands instead of running them.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .container_runner import ContainerRunner


@dataclass(frozen=True)
class RecordedCommand:
    """One call made against a RecordingRunner."""

    working_dir: str
    capture_output: bool
    verbose: bool
    argv: Tuple[str, ...] = field(default_factory=tuple)


class RecordingRunner(ContainerRunner):
    """
    Records every call and answers with a fixed exit status, or raises a
    fixed error to simulate a launch failure.
    """

    def __init__(self, exit_code: int = 0, error: Optional[OSError] = None):
        self.exit_code = exit_code
        self.error = error
        self.calls: List[RecordedCommand] = []

    def run_command(self, working_dir: str, capture_output: bool, verbose: bool, *args: str) -> int:
        self.calls.append(RecordedCommand(working_dir, capture_output, verbose, tuple(args)))
        if self.error is not None:
            raise self.error
        return self.exit_code

    @property
    def last_call(self) -> Optional[RecordedCommand]:
        return self.calls[-1] if self.calls else None
