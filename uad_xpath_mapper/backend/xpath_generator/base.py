"""
Base Addressing Strategy
Shared types and the abstract interface for leaf addressing
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from lxml import etree

if TYPE_CHECKING:
    from ..config import XPathOptions
    from .context import TraversalContext


class PredicateKind(Enum):
    ATTRIBUTE = "attribute"
    CHILD_TEXT = "child_text"


@dataclass(frozen=True)
class AncestorFrame:
    """One element instance on the current traversal path"""
    tag: str
    bare_tag: str
    element: etree._Element
    predicate: str
    predicate_kind: Optional[PredicateKind]
    signature: str
    index: int
    depth: int

    @property
    def has_attribute_predicate(self) -> bool:
        return self.predicate_kind is PredicateKind.ATTRIBUTE


class AddressingStrategy(ABC):
    """Abstract base class for turning a selected ancestor list into an XPath"""

    def __init__(self, options: 'XPathOptions'):
        self.options = options

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in debug logging"""
        pass

    @abstractmethod
    def address(self, selected: List[AncestorFrame], leaf: AncestorFrame,
                context: 'TraversalContext') -> Optional[str]:
        """Return the XPath for `leaf`, or None when this strategy does not apply"""
        pass
