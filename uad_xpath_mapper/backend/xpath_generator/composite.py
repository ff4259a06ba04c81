"""
Composite Grouping
Addresses leaves under repeating outer/inner container pairs as
`(//outer/inner)[n]`, numbering the whole ancestor slice as one unit.

Strategies are tried in order:
  1. AnchoredPairStrategy  slice from the first attribute-predicate frame
                           (or the first selected frame) to the group anchor
  2. GroupAnchorStrategy   the group anchor on its own
  3. PlainPathStrategy     filtered ancestor path, no grouping
"""
from typing import List, Optional, Sequence
import logging

from .base import AddressingStrategy, AncestorFrame
from .context import TraversalContext
from .steps import join_frames, leaf_suffix, plain_path, separator

logger = logging.getLogger(__name__)


def find_start_anchor(selected: Sequence[AncestorFrame]) -> int:
    """Position of the first frame with an attribute predicate, else 0"""
    for pos, frame in enumerate(selected):
        if frame.has_attribute_predicate:
            return pos
    return 0


def find_group_anchor(selected: Sequence[AncestorFrame], filter_parent_type: Optional[str],
                      start: int = 0) -> Optional[int]:
    """Position of the first filter-parent frame carrying a predicate, at or after `start`"""
    if not filter_parent_type:
        return None
    for pos in range(start, len(selected)):
        frame = selected[pos]
        if frame.bare_tag == filter_parent_type and frame.predicate:
            return pos
    return None


class _GroupingStrategy(AddressingStrategy):

    def _grouped_address(self, selected: List[AncestorFrame], start: int, group: int,
                         leaf: AncestorFrame, context: TraversalContext) -> str:
        inner = selected[start:group + 1]
        anchor = selected[group]
        number = context.composite_number(inner)

        xpath = f"(//{join_frames(inner, self.options, unindexed=anchor)})[{number}]"

        tail = selected[group + 1:]
        if tail:
            xpath += separator(anchor, tail[0]) + join_frames(tail, self.options)
        return xpath + leaf_suffix(selected, leaf, self.options)


class AnchoredPairStrategy(_GroupingStrategy):
    """Group the slice between the start anchor and the group anchor"""

    @property
    def name(self) -> str:
        return "anchored-pair"

    def address(self, selected, leaf, context) -> Optional[str]:
        start = find_start_anchor(selected)
        group = find_group_anchor(selected, self.options.filter_parent_type, start)
        if group is None:
            return None
        return self._grouped_address(selected, start, group, leaf, context)


class GroupAnchorStrategy(_GroupingStrategy):
    """Group on the group anchor alone, ignoring the start anchor"""

    @property
    def name(self) -> str:
        return "group-anchor"

    def address(self, selected, leaf, context) -> Optional[str]:
        group = find_group_anchor(selected, self.options.filter_parent_type)
        if group is None:
            return None
        return self._grouped_address(selected, group, group, leaf, context)


class PlainPathStrategy(AddressingStrategy):
    """Filtered ancestor path joined by adjacency"""

    @property
    def name(self) -> str:
        return "plain"

    def address(self, selected, leaf, context) -> Optional[str]:
        if not selected:
            return None
        return plain_path(selected, leaf, self.options)


def build_strategies(options) -> List[AddressingStrategy]:
    """Strategies in the order they are tried for the given options"""
    if options.composite_grouping and options.filter_parent_type:
        return [AnchoredPairStrategy(options), GroupAnchorStrategy(options), PlainPathStrategy(options)]
    return [PlainPathStrategy(options)]
