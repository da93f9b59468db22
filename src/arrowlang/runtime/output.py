"""
Output sinks handed to built-ins.

The interpreter never writes anything itself; it only carries the sink so
built-ins such as print can reach it.
"""

import sys
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO


class OutputSink(ABC):
    """Where built-ins send text."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write text verbatim (no newline is added)."""


class StreamOutput(OutputSink):
    """Writes to a text stream, stdout by default."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class BufferOutput(OutputSink):
    """Collects output in memory."""

    def __init__(self):
        self.chunks: List[str] = []

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self.chunks)

    def clear(self) -> None:
        self.chunks.clear()
