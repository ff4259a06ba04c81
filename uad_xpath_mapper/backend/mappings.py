"""
Mapping Builder
Turns `KEY : VALUE` lines (for example the generator's output, relabelled)
into an <ImageMappings> document
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union
import logging
import re

from lxml import etree

from .errors import InputReadError
from .output import write_text

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SOURCE = 'd:ImageFileLocationIdentifier'
DEFAULT_WRAP_PREFIX = 'tag'
METADATA_KEY_PATTERN = re.compile(r'^(URAR|USER)', re.IGNORECASE)


class MappingStyle(Enum):
    IMAGE = "image"
    METADATA = "metadata"


@dataclass
class MappingEntry:
    key: str
    value: str


def parse_mapping_lines(text: str) -> List[MappingEntry]:
    """
    Parse `KEY : VALUE` lines.

    Blank lines and lines starting with '#' or '//' are skipped. A line is
    split at the first ' : ' when present, otherwise at the first ':'.
    """
    entries: List[MappingEntry] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or line.startswith('//'):
            continue
        if ' : ' in line:
            key, _, value = line.partition(' : ')
        elif ':' in line:
            key, _, value = line.partition(':')
        else:
            logger.warning(f"Skipping line (no colon found): {line}")
            continue
        key, value = key.strip(), value.strip()
        if not key:
            logger.warning(f"Skipping line (empty key): {line}")
            continue
        entries.append(MappingEntry(key, value))
    return entries


def strip_image_source(xpath: str, image_source: str = DEFAULT_IMAGE_SOURCE) -> str:
    """Drop a trailing image-source step (any prefix, optional predicate)"""
    local_name = image_source.split(':')[-1]
    pattern = re.compile(
        r'/(?:' + re.escape(image_source) + r'|(?:[A-Za-z0-9_\-]+:)?' + re.escape(local_name) + r')'
        r'(?:\s*\[.*\])?\s*/?$'
    )
    match = pattern.search(xpath)
    if not match:
        return xpath
    trimmed = xpath[:match.start()]
    return trimmed[:-1] if trimmed.endswith('/') else trimmed


def _add(parent: etree._Element, tag: str, text: str) -> None:
    etree.SubElement(parent, tag).text = text


def build_image_mappings(entries: List[MappingEntry], image_source: str = DEFAULT_IMAGE_SOURCE,
                         wrap_prefix: str = DEFAULT_WRAP_PREFIX) -> etree._Element:
    root = etree.Element('ImageMappings')
    for entry in entries:
        common = etree.SubElement(root, 'common')
        _add(common, 'ACI_TagRedirector', f"{wrap_prefix}({entry.key})")
        _add(common, 'ACI_Tag', entry.key)
        _add(common, 'ACI_Image', 'true')
        _add(common, 'ACI_ImageSource', image_source)
        _add(common, 'UAD_Xpath', entry.value)
    return root


def build_metadata_mappings(entries: List[MappingEntry],
                            image_source: str = DEFAULT_IMAGE_SOURCE) -> etree._Element:
    """Only URAR / USER keys; values lose a trailing image-source step"""
    root = etree.Element('ImageMappings')
    for entry in entries:
        if not METADATA_KEY_PATTERN.match(entry.key):
            continue
        common = etree.SubElement(root, 'common')
        _add(common, 'ACI_TagPath', entry.key)
        _add(common, 'ACI_TagName', entry.key.split('\\')[-1])
        _add(common, 'ACI_Tag', entry.key)
        _add(common, 'ACI_TagIsCheckbox', 'false')
        _add(common, 'UAD_Xpath', strip_image_source(entry.value, image_source))
    return root


def build_mappings(text: str, style: Union[MappingStyle, str] = MappingStyle.IMAGE,
                   image_source: Optional[str] = None,
                   wrap_prefix: Optional[str] = None) -> etree._Element:
    """Parse mapping text and build the document for `style`"""
    style = MappingStyle(style)
    entries = parse_mapping_lines(text)
    image_source = image_source or DEFAULT_IMAGE_SOURCE

    if style is MappingStyle.METADATA:
        root = build_metadata_mappings(entries, image_source)
    else:
        root = build_image_mappings(entries, image_source, wrap_prefix or DEFAULT_WRAP_PREFIX)

    if len(root) == 0:
        logger.warning(f"No mappings found for style '{style.value}'")
    return root


def render_mappings(root: etree._Element) -> str:
    return etree.tostring(root, encoding='utf-8', xml_declaration=True, pretty_print=True).decode('utf-8')


def convert_mapping_file(input_path: Union[str, Path], output_path: Union[str, Path],
                         style: Union[MappingStyle, str] = MappingStyle.IMAGE,
                         image_source: Optional[str] = None,
                         wrap_prefix: Optional[str] = None) -> int:
    """
    Read a mapping text file and write the <ImageMappings> XML.

    Returns:
        Number of <common> entries written
    """
    path = Path(input_path)
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise InputReadError(f"Failed to read input file {path}: {e}") from e

    root = build_mappings(text, style, image_source, wrap_prefix)
    write_text(render_mappings(root), output_path)
    logger.info(f"Wrote {len(root)} mapping(s) to {output_path}")
    return len(root)
