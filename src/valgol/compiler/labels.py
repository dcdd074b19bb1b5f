"""
Label allocation for generated control flow.

Labels are handed out from a single monotonic counter and are never
reused. The hint only decorates the rendered name (``_else3``); identity
is the number, so two labels are never equal unless they are the same
allocation.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Label:
    """
    A generated label.

    Attributes:
        number: Unique sequence number from the allocator
        hint: Role of the label, used only when rendering
    """
    number: int
    hint: str = field(default="L", compare=False)

    @property
    def name(self) -> str:
        # Source identifiers start with a letter, so '_' keeps these disjoint.
        return f"_{self.hint}{self.number}"

    def __str__(self) -> str:
        return self.name


class LabelAllocator:
    """
    Issues unique, increasing labels.

    Example:
        >>> labels = LabelAllocator()
        >>> labels.new("loop"), labels.new("exit")
        (Label(number=1, hint='loop'), Label(number=2, hint='exit'))
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._issued: list[Label] = []

    def new(self, hint: str = "L") -> Label:
        """Allocate the next label."""
        label = Label(self._next, hint)
        self._next += 1
        self._issued.append(label)
        logger.debug(f"allocated label {label}")
        return label

    @property
    def issued(self) -> tuple[Label, ...]:
        """All labels allocated so far, in allocation order."""
        return tuple(self._issued)

    def __len__(self) -> int:
        return len(self._issued)
