"""
Traversal Context
Per-run counters: signature indexes, composite numbers and leaf statistics
"""
from typing import Dict, List, NamedTuple, Sequence, Tuple
import logging

from .base import AncestorFrame

logger = logging.getLogger(__name__)


class OutputLine(NamedTuple):
    text: str
    xpath: str

    def render(self) -> str:
        return f"{self.text} : {self.xpath}"


class TraversalContext:
    """
    Mutable state threaded through one walk of one document.

    A new context is created for every run; indexes are only meaningful
    relative to the document that produced them.
    """

    def __init__(self):
        # signature → running count
        self._signature_counts: Dict[str, int] = {}
        # last composite number handed out, shared by all composite keys
        self._composite_count = 0
        # composite instance key → number already assigned
        self._composite_instances: Dict[Tuple, int] = {}
        self.lines: List[OutputLine] = []
        self.total_leaves = 0
        self.included_leaves = 0

    def assign_index(self, signature: str) -> int:
        """1 on the first occurrence of `signature`, n on the n-th"""
        count = self._signature_counts.get(signature, 0) + 1
        self._signature_counts[signature] = count
        return count

    def composite_number(self, frames: Sequence[AncestorFrame]) -> int:
        """
        Number of the physical instance of the ancestor slice `frames`.

        Every new instance takes the next number of one run-wide sequence,
        so instances sharing a composite key are numbered in increasing
        document order. Asking again for the same concrete instance returns
        the number it already got.
        """
        key = ''.join(frame.signature for frame in frames)
        instance_key = (key,) + tuple((frame.signature, frame.index) for frame in frames)
        number = self._composite_instances.get(instance_key)
        if number is None:
            self._composite_count += 1
            number = self._composite_count
            self._composite_instances[instance_key] = number
            logger.debug(f"Composite {key} instance #{number}")
        return number

    def emit(self, text: str, xpath: str) -> None:
        self.lines.append(OutputLine(text, xpath))
