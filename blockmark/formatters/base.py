"""Formatter interface shared by every token stream serializer.

WHY: The CLI writes whatever the selected formatters produce without
knowing their formats. It only needs each formatter to name itself and
turn a stream head into file contents.

HOW: BaseFormatter declares ``name`` and ``format()`` as abstract.
``format()`` hands back FormatterOutput records, each pairing a file
suffix with the serialized text and its MIME type.

RULES:
- Subclasses implement both ``name`` and ``format()``
- ``format()`` always returns a list, even for a single file
- ``suffix`` begins with a hyphen, e.g. ``"-tokens.json"``; the caller
  prepends the source file stem
- Formatters read the stream through its links and never relink tokens
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from blockmark.core.ir import Token


@dataclass
class FormatterOutput:
    """A serialized stream ready to be written to disk.

    Attributes:
        suffix: Appended to the source stem; ``"-tokens.txt"`` turns
                ``program.coffee`` into ``program-tokens.txt``.
        content: Full file text.
        media_type: MIME type, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Base class for token stream formatters.

    New formats subclass this in their own module under formatters/ and
    add one entry to FORMATTERS in formatters/__init__.py.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name shown in CLI status lines."""

    @abstractmethod
    def format(self, stream: Token) -> list[FormatterOutput]:
        """Serialize the stream starting at ``stream``.

        Args:
            stream: Head token returned by build_token_stream().

        Returns:
            One FormatterOutput per file to write.
        """
