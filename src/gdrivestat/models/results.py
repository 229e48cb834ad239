"""Result model for stat invocations."""

from __future__ import annotations

from dataclasses import dataclass, field

from gdrivestat.errors import SubtreeError


@dataclass(slots=True)
class StatSummary:
    """Outcome of a stat invocation whose sources all resolved and rendered."""

    sources: list[str] = field(default_factory=list)
    objects_rendered: int = 0
    subtree_errors: list[SubtreeError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when no failure was observed below the first level either."""
        return not self.subtree_errors
