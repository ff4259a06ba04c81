"""
XPath Steps
Predicate synthesis, step rendering and plain path assembly
"""
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from lxml import etree

from ..xml_parser import XMLParser
from .base import AncestorFrame, PredicateKind

if TYPE_CHECKING:
    from ..config import XPathOptions


def predicate_for(bare_tag: str, element: etree._Element,
                  options: 'XPathOptions') -> Tuple[str, Optional[PredicateKind]]:
    """
    Derive the single optional predicate for an element.

    The child-text rule renders with attribute syntax (`[@ImageCategoryType=...]`)
    even though its value comes from a child element; downstream mappings
    expect that form.

    Returns:
        (predicate, kind); ('', None) when no rule applies
    """
    escape = XMLParser.xpath_literal

    if options.filter_parent_type and options.filter_child_type and bare_tag == options.filter_parent_type:
        child = XMLParser.find_child(element, options.filter_child_type)
        if child is not None:
            text = XMLParser.direct_text(child)
            if text:
                return f"[@{options.filter_child_type}={escape(text)}]", PredicateKind.CHILD_TEXT

    if options.predicate_attribute_name:
        raw = XMLParser.find_attribute(element, options.predicate_attribute_name)
        if raw is not None and raw.strip():
            return f"[@{options.predicate_attribute_name}={escape(raw)}]", PredicateKind.ATTRIBUTE

    return '', None


def signature_of(bare_tag: str, predicate: str, prefix: str) -> str:
    return f"{prefix}:{bare_tag}{predicate}"


def render_step(bare_tag: str, predicate: str, index: Optional[int], prefix: str,
                always_show_index: bool = False) -> str:
    """
    Render `prefix:tag[predicate][index]`.

    The index is appended when forced or greater than 1; passing None
    suppresses it entirely.
    """
    step = f"{prefix}:{bare_tag}{predicate}"
    if index is not None and (always_show_index or index > 1):
        step += f"[{index}]"
    return step


def select_frames(chain: Sequence[AncestorFrame], options: 'XPathOptions') -> List[AncestorFrame]:
    """Ancestors (leaf included) whose bare tag is in the inclusion set"""
    return [frame for frame in chain if options.includes(frame.bare_tag)]


def separator(previous: AncestorFrame, current: AncestorFrame) -> str:
    """'/' for a direct child of `previous`, '//' when ancestors were skipped"""
    return '/' if current.depth == previous.depth + 1 else '//'


def join_frames(frames: Sequence[AncestorFrame], options: 'XPathOptions',
                unindexed: Optional[AncestorFrame] = None) -> str:
    """
    Join rendered frames by adjacency. The first step carries no separator.

    Args:
        frames: frames in chain order
        unindexed: frame rendered without its numeric index
    """
    parts: List[str] = []
    previous = None
    for frame in frames:
        index = None if frame is unindexed else frame.index
        step = render_step(frame.bare_tag, frame.predicate, index,
                           options.namespace_prefix, options.always_show_index)
        parts.append(step if previous is None else separator(previous, frame) + step)
        previous = frame
    return ''.join(parts)


def leaf_suffix(selected: Sequence[AncestorFrame], leaf: AncestorFrame, options: 'XPathOptions') -> str:
    """
    Trailing leaf step, never indexed.

    Empty when the leaf is itself the last selected frame. Otherwise the
    leaf is joined with `//`; same-named sibling leaves share an address.
    """
    if selected and selected[-1].bare_tag == leaf.bare_tag:
        return ''
    return f"//{render_step(leaf.bare_tag, '', None, options.namespace_prefix)}"


def plain_path(selected: Sequence[AncestorFrame], leaf: AncestorFrame, options: 'XPathOptions') -> str:
    """`//` + filtered ancestor steps + leaf step"""
    return '//' + join_frames(selected, options) + leaf_suffix(selected, leaf, options)
