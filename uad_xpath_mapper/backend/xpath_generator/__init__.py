"""
XPath Generator
Walks a parsed document and emits one `text : xpath` line per leaf
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..config import XPathOptions
from ..output import write_lines
from ..xml_parser import Node, XMLParser
from .base import AddressingStrategy, AncestorFrame, PredicateKind
from .composite import (
    AnchoredPairStrategy,
    GroupAnchorStrategy,
    PlainPathStrategy,
    build_strategies,
)
from .context import OutputLine, TraversalContext
from .steps import predicate_for, select_frames, signature_of

logger = logging.getLogger(__name__)

__all__ = [
    'AddressingStrategy', 'AncestorFrame', 'AnchoredPairStrategy', 'GenerationResult',
    'GroupAnchorStrategy', 'OutputLine', 'PlainPathStrategy', 'PredicateKind',
    'TraversalContext', 'XPathGenerator', 'generate_xpaths',
]


@dataclass
class GenerationResult:
    lines: List[OutputLine] = field(default_factory=list)
    total_leaves: int = 0
    included_leaves: int = 0

    @property
    def count(self) -> int:
        return len(self.lines)

    def rendered(self) -> List[str]:
        return [line.render() for line in self.lines]


class XPathGenerator:
    """Leaf-to-XPath addressing for one configuration"""

    def __init__(self, options: Optional[XPathOptions] = None):
        self.options = options or XPathOptions()
        self.strategies = build_strategies(self.options)

    def generate(self, root: Node) -> GenerationResult:
        """
        Walk `root` in document order and address every non-empty leaf
        that has at least one included ancestor.

        Args:
            root: parsed document root

        Returns:
            GenerationResult with the lines and leaf statistics
        """
        if self.options.debug:
            logger.info(f"Options: {self.options.describe()}")
            logger.info(f"Strategies: {', '.join(s.name for s in self.strategies)}")

        context = TraversalContext()
        self._walk([root], [], context)

        result = GenerationResult(
            lines=context.lines,
            total_leaves=context.total_leaves,
            included_leaves=context.included_leaves,
        )
        if self.options.debug:
            logger.info(f"Leaves: {result.total_leaves} total, {result.included_leaves} "
                        f"with an included ancestor, {result.count} line(s)")
        if not result.lines:
            logger.warning(
                f"No XPath lines generated: {result.total_leaves} leaf element(s), "
                f"{result.included_leaves} under {', '.join(self.options.include_elements) or 'no included elements'}"
            )
        return result

    def _walk(self, elements: List[Node], ancestors: List[AncestorFrame], context: TraversalContext) -> None:
        options = self.options
        for element in elements:
            bare = XMLParser.bare_tag(element.tag)
            predicate, kind = predicate_for(bare, element, options)
            signature = signature_of(bare, predicate, options.namespace_prefix)

            frame = AncestorFrame(
                tag=element.tag,
                bare_tag=bare,
                element=element,
                predicate=predicate,
                predicate_kind=kind,
                signature=signature,
                index=context.assign_index(signature),
                depth=len(ancestors),
            )
            chain = ancestors + [frame]

            children = XMLParser.element_children(element)
            if children:
                self._walk(children, chain, context)
            else:
                self._visit_leaf(chain, context)

    def _visit_leaf(self, chain: List[AncestorFrame], context: TraversalContext) -> None:
        leaf = chain[-1]
        context.total_leaves += 1

        selected = select_frames(chain, self.options)
        if not selected:
            return
        context.included_leaves += 1

        text = XMLParser.direct_text(leaf.element)
        if not text:
            return

        for strategy in self.strategies:
            xpath = strategy.address(selected, leaf, context)
            if xpath is not None:
                logger.debug(f"[{strategy.name}] {leaf.bare_tag} -> {xpath}")
                context.emit(text, xpath)
                return


def generate_xpaths(input_path: Union[str, Path], output_path: Union[str, Path],
                    options: Optional[XPathOptions] = None) -> GenerationResult:
    """
    Read `input_path`, generate XPath lines and write them to `output_path`.

    Raises:
        InputReadError, InputParseError: before any traversal
        OutputWriteError: after traversal, nothing persisted
    """
    root = XMLParser.load_file(input_path)
    result = XPathGenerator(options).generate(root)
    write_lines(result.rendered(), output_path)
    logger.info(f"Generated {result.count} XPath entries -> {output_path}")
    return result
