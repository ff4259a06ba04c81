"""
XML Parser Module
Parsing, tag normalization and literal helpers shared by the generator,
the synchronizer and the API
"""
from pathlib import Path
from typing import Dict, List, Optional, Union
from lxml import etree
import logging

from .errors import InputParseError, InputReadError

logger = logging.getLogger(__name__)

# noinspection PyProtectedMember
Node = etree._Element


class XMLParser:
    """Parse and query appraisal XML documents"""

    @staticmethod
    def parse_xml(xml_content: Union[str, bytes]) -> Node:
        """
        Parse XML content into an lxml element tree.

        Undeclared namespace prefixes are tolerated (tags then keep their
        literal `prefix:local` form); every other parser error is fatal.

        Args:
            xml_content: XML as text or bytes

        Returns:
            Root element

        Raises:
            InputParseError: content is empty or not well-formed
        """
        if isinstance(xml_content, str):
            xml_content = xml_content.encode('utf-8')
        if not xml_content or not xml_content.strip():
            raise InputParseError("XML content is empty")

        parser = etree.XMLParser(recover=True, resolve_entities=False, huge_tree=True)
        try:
            root = etree.fromstring(xml_content, parser)
        except etree.XMLSyntaxError as e:
            raise InputParseError(f"XML Syntax Error: {e}") from e

        fatal = [
            entry for entry in parser.error_log
            if entry.level >= etree.ErrorLevels.ERROR
            and entry.domain != etree.ErrorDomains.NAMESPACE
        ]
        if fatal:
            first = fatal[0]
            raise InputParseError(f"XML Syntax Error: {first.message.strip()} (line {first.line}, column {first.column})")
        if root is None:
            raise InputParseError("XML Syntax Error: no root element")

        for entry in parser.error_log:
            if entry.domain == etree.ErrorDomains.NAMESPACE:
                logger.debug(f"Namespace warning: {entry.message.strip()}")
        return root

    @staticmethod
    def load_file(path: Union[str, Path]) -> Node:
        """
        Read and parse an XML file.

        Raises:
            InputReadError: the file is missing or unreadable
            InputParseError: the content is not well-formed
        """
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise InputReadError(f"Cannot read input file {path}: {e}") from e
        logger.info(f"Reading XML: {path} ({len(content)} bytes)")
        return XMLParser.parse_xml(content)

    @staticmethod
    def bare_tag(tag: str) -> str:
        """Strip `{uri}` and `prefix:` from a tag, e.g. d:PROPERTY -> PROPERTY"""
        if not tag:
            return tag
        if tag.startswith('{'):
            tag = tag.split('}', 1)[1]
        if ':' in tag:
            tag = tag.split(':', 1)[1]
        return tag

    @staticmethod
    def xpath_literal(value: str) -> str:
        """Return an XPath-safe quoted string for the given value."""
        if "'" not in value:
            return f"'{value}'"
        if '"' not in value:
            return f'"{value}"'
        # Both quote types present → use XPath concat()
        parts = value.split("'")
        pieces: List[str] = []
        for i, part in enumerate(parts):
            if part:
                pieces.append(f"'{part}'")
            if i < len(parts) - 1:
                pieces.append("\"'\"")
        return f"concat({','.join(pieces)})"

    @staticmethod
    def element_children(element: Node) -> List[Node]:
        """Element children in document order, skipping comments and PIs"""
        return [child for child in element if isinstance(child.tag, str)]

    @staticmethod
    def is_leaf(element: Node) -> bool:
        return not XMLParser.element_children(element)

    @staticmethod
    def direct_text(element: Node) -> str:
        """Trimmed text held directly by the element (not its descendants)"""
        chunks = [element.text or '']
        chunks.extend(child.tail or '' for child in element)
        return ''.join(chunks).strip()

    @staticmethod
    def find_attribute(element: Node, name: str) -> Optional[str]:
        """Attribute value by exact or bare name"""
        value = element.get(name)
        if value is not None:
            return value
        for key, val in element.attrib.items():
            if XMLParser.bare_tag(key) == name:
                return val
        return None

    @staticmethod
    def find_child(element: Node, bare_name: str, ignore_case: bool = False) -> Optional[Node]:
        """First direct child whose bare tag matches"""
        wanted = bare_name.lower() if ignore_case else bare_name
        for child in XMLParser.element_children(element):
            tag = XMLParser.bare_tag(child.tag)
            if (tag.lower() if ignore_case else tag) == wanted:
                return child
        return None

    @staticmethod
    def namespaces_for(root: Node, prefix: Optional[str] = None) -> Dict[str, str]:
        """
        Namespace map usable in XPath queries against `root`.

        The default namespace has no prefix in XPath 1.0, so it is bound to
        `prefix` (the generator's output prefix) when that name is free.
        """
        nsmap = {k: v for k, v in root.nsmap.items() if k is not None}
        default_ns_uri = root.nsmap.get(None)
        if default_ns_uri and prefix and prefix not in nsmap:
            nsmap[prefix] = default_ns_uri
        return nsmap

    @staticmethod
    def query_xpath(xml_content: Union[str, bytes], xpath_query: str, namespace_prefix: Optional[str] = None) -> Dict:
        """
        Execute XPath query on XML content

        Args:
            xml_content: XML string
            xpath_query: XPath expression
            namespace_prefix: prefix to bind to the document's default namespace

        Returns:
            Dictionary with matches
        """
        try:
            root = XMLParser.parse_xml(xml_content)
            namespaces = XMLParser.namespaces_for(root, namespace_prefix)
            matches = root.xpath(xpath_query, namespaces=namespaces)
        except InputParseError as e:
            logger.error(f"Error parsing XML for XPath query: {e}")
            return {'success': False, 'error': str(e), 'count': 0, 'matches': []}
        except etree.XPathError as e:
            logger.error(f"Error executing XPath query: {e}")
            return {'success': False, 'error': f"XPath Error: {e}", 'count': 0, 'matches': []}

        if not isinstance(matches, list):
            # string(), count() and friends return scalars
            return {'success': True, 'count': 1, 'matches': [], 'value': matches}

        results = []
        for match in matches:
            if isinstance(match, etree._Element) and isinstance(match.tag, str):
                results.append({
                    'tag': XMLParser.bare_tag(match.tag),
                    'attributes': dict(match.attrib),
                    'text': XMLParser.direct_text(match),
                })

        logger.info(f"XPath query '{xpath_query}' found {len(results)} match(es)")
        return {
            'success': True,
            'count': len(results),
            'matches': results
        }
