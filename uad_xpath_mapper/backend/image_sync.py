"""
Image Category Sync
Copies each image's category from a source document to the matching images
of a target document, matched by a shared discriminator child
"""
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

from lxml import etree

from .output import write_text
from .xml_parser import Node, XMLParser

logger = logging.getLogger(__name__)

IMAGE_TAG = 'IMAGE'
KEY_CHILD = 'MIMETypeIdentifier'
CATEGORY_CHILD = 'ImageCategoryType'


def find_images(root: Node, image_tag: str = IMAGE_TAG) -> List[Node]:
    """Image elements in document order; images nested in images are not searched"""
    found: List[Node] = []

    def recurse(element: Node):
        for child in XMLParser.element_children(element):
            if XMLParser.bare_tag(child.tag) == image_tag:
                found.append(child)
            else:
                recurse(child)

    if XMLParser.bare_tag(root.tag) == image_tag:
        return [root]
    recurse(root)
    return found


def child_text(element: Node, child_name: str) -> Optional[str]:
    """Trimmed text of a leaf child (case-insensitive bare name), else None"""
    child = XMLParser.find_child(element, child_name, ignore_case=True)
    if child is None or not XMLParser.is_leaf(child):
        return None
    return XMLParser.direct_text(child)


def set_child_text(element: Node, child_name: str, text: str) -> None:
    """
    Overwrite the child's text, creating the child if absent.

    A new child takes the parent's namespace, or the parent's literal
    `prefix:` when the document never declared that prefix.
    """
    child = XMLParser.find_child(element, child_name, ignore_case=True)
    if child is None:
        if element.tag.startswith('{'):
            child = etree.SubElement(element, element.tag.split('}', 1)[0] + '}' + child_name)
        elif ':' in element.tag:
            # lxml refuses ':' in new tag names; a recovered fragment keeps it
            prefix = element.tag.split(':', 1)[0]
            child = XMLParser.parse_xml(f"<{prefix}:{child_name}/>")
            element.append(child)
        else:
            child = etree.SubElement(element, child_name)
    child.text = text


def build_category_index(root: Node, image_tag: str = IMAGE_TAG, key_child: str = KEY_CHILD,
                         category_child: str = CATEGORY_CHILD) -> Dict[str, Optional[str]]:
    """Discriminator → category; the first image with a given discriminator wins"""
    index: Dict[str, Optional[str]] = {}
    for image in find_images(root, image_tag):
        key = child_text(image, key_child)
        if not key:
            continue
        if key not in index:
            index[key] = child_text(image, category_child) or None
    return index


def sync_image_categories(source: Node, target: Node, image_tag: str = IMAGE_TAG,
                          key_child: str = KEY_CHILD, category_child: str = CATEGORY_CHILD) -> int:
    """
    Update `target` in place.

    Returns:
        Number of target images whose category changed
    """
    index = build_category_index(source, image_tag, key_child, category_child)
    updates = 0
    for image in find_images(target, image_tag):
        key = child_text(image, key_child)
        if not key or key not in index:
            continue
        category = index[key]
        if category is None:
            continue
        if child_text(image, category_child) != category:
            set_child_text(image, category_child, category)
            updates += 1
    logger.info(f"{updates} image(s) updated from {len(index)} source discriminator(s)")
    return updates


def render_document(root: Node) -> str:
    return etree.tostring(root, encoding='utf-8', xml_declaration=True, pretty_print=True).decode('utf-8')


def sync_image_files(source_path: Union[str, Path], target_path: Union[str, Path],
                     output_path: Union[str, Path], **kwargs) -> int:
    """Read both documents, sync categories and write the updated target"""
    source = XMLParser.load_file(source_path)
    target = XMLParser.load_file(target_path)
    updates = sync_image_categories(source, target, **kwargs)
    write_text(render_document(target), output_path)
    logger.info(f"Done. {updates} image(s) updated. Output written to {output_path}")
    return updates
