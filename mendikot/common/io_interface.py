"""
Line-based console IO for the command-line adapter.

The adapter only ever writes lines and reads one answer per prompt, so an
IO interface is two methods. Swapping the interface lets the same adapter
run at a terminal, in tests with scripted answers, or headless.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List


class IOInterface(ABC):
    """Where the console adapter writes the table and reads card choices."""

    @abstractmethod
    def output(self, message: str) -> None:
        """Write one line."""
        pass

    @abstractmethod
    def input(self, prompt: str) -> str:
        """
        Read one answer.

        Raises:
            EOFError: When no more input can arrive
        """
        pass

    def output_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.output(line)


class DummyIOInterface(IOInterface):
    """
    Headless IO. Output is discarded and input behaves like a closed console,
    so every prompt falls through to the adapter's timeout default.
    """

    def output(self, message: str) -> None:
        pass

    def input(self, prompt: str) -> str:
        raise EOFError("DummyIOInterface has no input")


class TestIOInterface(IOInterface):
    """Collects output and answers prompts from a script."""

    __test__ = False

    def __init__(self, input_responses: List[str] = None):
        self.sent_messages: List[str] = []
        self.prompts: List[str] = []
        self.input_responses: List[str] = list(input_responses or [])

    def output(self, message: str) -> None:
        self.sent_messages.append(message)

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.input_responses:
            raise EOFError("No more input queued in TestIOInterface")
        return self.input_responses.pop(0)

    @property
    def transcript(self) -> str:
        return "\n".join(self.sent_messages)


class ConsoleIOInterface(IOInterface):
    """Standard input and output."""

    def output(self, message: str) -> None:
        print(message, flush=True)

    def input(self, prompt: str) -> str:
        return input(prompt)
