"""Registry of PII detection categories.

Rules come from configuration as ``name -> regex`` text plus an ordered list
of enabled names. They are compiled once, case-insensitively, and never
re-parsed per call.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence

from app.logging.logger import Log
from app.preprocessing.exceptions import PatternCompilationError
from app.preprocessing.models import PiiCategory


def compile_category(name: str, rule: str) -> PiiCategory:
    """Compile *rule* into a category.

    Raises:
        PatternCompilationError: if the rule is not a valid regex or
            matches the empty string.
    """
    try:
        pattern = re.compile(rule, re.IGNORECASE)
    except re.error as exc:
        raise PatternCompilationError(
            f"Invalid pattern for category '{name}': {exc}"
        ) from exc

    # A rule that accepts "" would replace nothing forever.
    if pattern.fullmatch("") is not None:
        raise PatternCompilationError(
            f"Pattern for category '{name}' matches the empty string"
        )
    return PiiCategory(name=name, pattern=pattern)


class PatternRegistry:
    """Immutable, ordered set of compiled PII categories."""

    def __init__(
        self,
        categories: Sequence[PiiCategory],
        rejected: Mapping[str, str] | None = None,
    ) -> None:
        self._categories: tuple[PiiCategory, ...] = tuple(categories)
        self._by_name: dict[str, PiiCategory] = {c.name: c for c in self._categories}
        self._rejected: dict[str, str] = dict(rejected or {})

    @classmethod
    def from_config(
        cls,
        categories: Sequence[str],
        patterns: Mapping[str, str],
    ) -> PatternRegistry:
        """Build the registry from the enabled names and their rule text.

        Names without a rule are skipped. Rules that fail to compile are
        logged and recorded in ``rejected``; the rest of the registry is
        still usable.
        """
        compiled: list[PiiCategory] = []
        rejected: dict[str, str] = {}
        seen: set[str] = set()

        for name in categories:
            if name in seen:
                continue
            seen.add(name)

            rule = patterns.get(name)
            if not rule or not rule.strip():
                Log.debug(f"No pattern configured for PII category '{name}', skipping")
                continue

            try:
                compiled.append(compile_category(name, rule))
            except PatternCompilationError as exc:
                Log.error(str(exc))
                rejected[name] = str(exc)

        Log.info(
            f"Pattern registry loaded: {len(compiled)} categories"
            f" ({', '.join(c.name for c in compiled) or 'none'})"
        )
        return cls(compiled, rejected)

    def get(self, name: str) -> PiiCategory | None:
        return self._by_name.get(name)

    @property
    def rejected(self) -> dict[str, str]:
        """Categories whose rule was unusable, with the reason."""
        return dict(self._rejected)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._categories]

    def __iter__(self) -> Iterator[PiiCategory]:
        return (c for c in self._categories if c.enabled)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
