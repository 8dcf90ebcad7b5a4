"""Displays show notices to the user.

Every display inherits from BaseDisplay. The console display stands in for a
toast popup: it writes the notice text to a stream.
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from .bus import Notice


class BaseDisplay(ABC):
    """Abstract base class for all displays.

    A display's name is derived from its class name, so ``ConsoleDisplay``
    receives notices addressed to ``"console"``.
    """

    @property
    def name(self) -> str:
        return self.__class__.__name__.replace("Display", "").lower()

    @abstractmethod
    async def show(self, notice: Notice) -> None:
        """Present the notice to the user."""
        pass


class ConsoleDisplay(BaseDisplay):
    """Writes each notice to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    async def show(self, notice: Notice) -> None:
        self.stream.write(notice.content + "\n")
        self.stream.flush()
