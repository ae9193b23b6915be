"""Output formatter registry — pluggable serializers of the token stream.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json_tokens"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockmark.formatters.json_tokens import JSONTokensFormatter
from blockmark.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from blockmark.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "json_tokens": JSONTokensFormatter,
    "plain_text": PlainTextFormatter,
}
