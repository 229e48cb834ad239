"""Report options and recursion budget."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class DepthBudget:
    """
    Remaining recursion levels: finite (`remaining >= 0`) or unlimited.

    Use `DepthBudget.from_int` to build one from a command-line style integer
    where any negative value means unlimited.
    """

    remaining: Optional[int] = None

    def __post_init__(self) -> None:
        if self.remaining is None:
            return
        if not isinstance(self.remaining, int) or isinstance(self.remaining, bool):
            raise TypeError("DepthBudget.remaining must be an int or None")
        if self.remaining < 0:
            raise ValueError("DepthBudget.remaining must be >= 0 (use unlimited())")

    @classmethod
    def finite(cls, n: int) -> DepthBudget:
        return cls(remaining=n)

    @classmethod
    def unlimited(cls) -> DepthBudget:
        return cls(remaining=None)

    @classmethod
    def from_int(cls, n: int) -> DepthBudget:
        if n < 0:
            return cls.unlimited()
        return cls.finite(n)

    @property
    def is_unlimited(self) -> bool:
        return self.remaining is None

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def descend(self) -> DepthBudget:
        """Budget for the next level down. Unlimited budgets stay unlimited."""
        if self.remaining is None:
            return self
        if self.remaining == 0:
            raise ValueError("cannot descend with an exhausted depth budget")
        return DepthBudget(remaining=self.remaining - 1)


@dataclass(slots=True, frozen=True)
class ReportOptions:
    """
    Options shared by one stat invocation.

    Attributes:
        checksum_only: Emit only "<md5>  <path>" lines.
        csv: Emit permission rows as CSV instead of the verbose block.
        depth: Maximum recursion levels below each source.
        include_hidden: List children whose names start with ".".
        root_path_is_trivial: The requested path is the Drive root; in checksum
            mode a root folder is then reported without a leading label.
    """

    checksum_only: bool = False
    csv: bool = False
    depth: DepthBudget = DepthBudget.finite(0)
    include_hidden: bool = False
    root_path_is_trivial: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.depth, int) and not isinstance(self.depth, bool):
            object.__setattr__(self, "depth", DepthBudget.from_int(self.depth))
        if not isinstance(self.depth, DepthBudget):
            raise TypeError("ReportOptions.depth must be a DepthBudget or an int")

        for name in ("checksum_only", "csv", "include_hidden", "root_path_is_trivial"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"ReportOptions.{name} must be a bool")
