"""
Parse SCL text into the tree model.

This is the only place raw XML is read. Parsing goes through defusedxml's
expat builder so entity expansion and external entities are refused, and
every parser failure surfaces as a single ``MalformedDocumentError`` before
any extraction logic runs.
"""

import logging
import re
from xml.dom import Node as DomNode
from xml.parsers.expat import ExpatError

from defusedxml import DefusedXmlException, expatbuilder  # type: ignore[import-untyped]

from scd_extract.exceptions import MalformedDocumentError
from scd_extract.model import Document, Element, Node, Text, VerbatimBlock

logger = logging.getLogger(__name__)

DECLARATION_RE = re.compile(r"^\s*(<\?xml\s[^?]*\?>)")


def parse_document(source: str | bytes | Document) -> Document:
    """
    Turn a string, bytes, or an already parsed ``Document`` into a ``Document``.

    Args:
        source: SCL/CID/ICD text, raw bytes, or an existing Document

    Returns:
        Document with comments and processing instructions dropped

    Raises:
        MalformedDocumentError: If the input is not well-formed XML or is of an
            unsupported type
    """
    if isinstance(source, Document):
        return source

    if not isinstance(source, (str, bytes)):
        raise MalformedDocumentError(
            f"input must be XML text or a Document, got {type(source).__name__}"
        )

    try:
        # namespaces=False keeps xmlns declarations as ordinary attributes in
        # source order
        dom = expatbuilder.parseString(source, namespaces=False)
    except ExpatError as e:
        raise MalformedDocumentError(str(e)) from e
    except DefusedXmlException as e:
        raise MalformedDocumentError(f"forbidden construct: {e}") from e

    root_node = dom.documentElement
    if root_node is None:
        raise MalformedDocumentError("document has no root element")

    root = _convert_element(root_node)
    logger.debug(f"Parsed document with root <{root.tag}>")
    return Document(root=root, declaration=_find_declaration(source))


def _find_declaration(source: str | bytes) -> str | None:
    if isinstance(source, bytes):
        source = source[:200].decode("utf-8", errors="ignore")
    match = DECLARATION_RE.match(source.lstrip("\ufeff"))
    return match.group(1) if match else None


def _convert_element(dom_element) -> Element:
    element = Element(tag=dom_element.tagName, attributes=dict(dom_element.attributes.items()))
    stack = [(dom_element, element)]
    while stack:
        source, target = stack.pop()
        for child in source.childNodes:
            node = _convert_leaf(child)
            if node is not None:
                target.children.append(node)
            elif child.nodeType == DomNode.ELEMENT_NODE:
                sub = Element(tag=child.tagName, attributes=dict(child.attributes.items()))
                target.children.append(sub)
                stack.append((child, sub))
    return element


def _convert_leaf(dom_node) -> Node | None:
    if dom_node.nodeType == DomNode.CDATA_SECTION_NODE:
        return VerbatimBlock(dom_node.data)
    if dom_node.nodeType == DomNode.TEXT_NODE:
        return Text(dom_node.data)
    return None
