"""
Canonical text serialization of the tree model.

Output depends only on the tree, never on how the source was indented, so the
same device extracted twice yields byte-identical files that diff cleanly.

Rules, applied per element:
- no meaningful children: self-closing tag
- exactly one non-blank text child: ``<Tag attrs>text</Tag>`` on one line
- a verbatim container (``Private``) holding CDATA: opening tag, each CDATA
  block on its own line one level deeper, closing tag
- otherwise: opening tag, one child per line one level deeper, closing tag

Adjacent text nodes are merged and blank text is dropped everywhere. CDATA
content is never escaped or re-indented, only its line endings are normalized
to LF.
"""

from scd_extract.model import Document, Element, Node, Text, VerbatimBlock

DEFAULT_INDENT = "  "
DEFAULT_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
DEFAULT_VERBATIM_CONTAINERS = ("Private",)

# "&" must stay first so later substitutions are not double-escaped
_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)
_ATTRIBUTE_ESCAPES = _ESCAPES + (
    ("\t", "&#9;"),
    ("\n", "&#10;"),
    ("\r", "&#13;"),
)


def escape_xml(value: str) -> str:
    """Escape the five reserved XML characters."""
    for char, entity in _ESCAPES:
        value = value.replace(char, entity)
    return value


def escape_attribute(value: str) -> str:
    """
    Escape an attribute value.

    Tab, LF and CR are written as character references, otherwise a parser
    would normalize them to spaces.
    """
    for char, entity in _ATTRIBUTE_ESCAPES:
        value = value.replace(char, entity)
    return value


def normalize_verbatim(content: str) -> str:
    """Collapse CRLF and lone CR line endings to LF."""
    return content.replace("\r\n", "\n").replace("\r", "\n")


class CanonicalFormatter:
    """
    Serialize a Document or Element into canonical indented text.

    Example:
        >>> formatter = CanonicalFormatter(indent="    ")
        >>> print(formatter.format(document))
        <?xml version="1.0" encoding="utf-8"?>
        <SCL version="2007">
            <Header id="demo"/>
        </SCL>
    """

    def __init__(
        self,
        indent: str = DEFAULT_INDENT,
        declaration: str = DEFAULT_DECLARATION,
        verbatim_containers: tuple[str, ...] | list[str] = DEFAULT_VERBATIM_CONTAINERS,
    ):
        self.indent = indent
        self.declaration = declaration
        self.verbatim_containers = frozenset(verbatim_containers)

    def format(self, tree: Document | Element) -> str:
        root = tree.root if isinstance(tree, Document) else tree
        formatted = "\n".join(self._format_element(root, 0)) + "\n"

        prefix = self.declaration + "\n"
        if not formatted.startswith(prefix):
            return prefix + formatted
        return formatted

    def _format_element(self, element: Element, depth: int) -> list[str]:
        pad = self.indent * depth
        attributes = " ".join(
            f'{name}="{escape_attribute(value)}"'
            for name, value in element.attributes.items()
        )
        open_tag = f"<{element.tag} {attributes}" if attributes else f"<{element.tag}"
        close_tag = f"</{element.tag}>"
        children = [child for child in _merge_text(element.children) if not _is_blank(child)]

        if element.local_name in self.verbatim_containers and any(
            isinstance(child, VerbatimBlock) for child in children
        ):
            children = [child for child in children if isinstance(child, VerbatimBlock)]
        elif not children:
            return [f"{pad}{open_tag}/>"]
        elif len(children) == 1 and isinstance(children[0], Text):
            text = escape_xml(children[0].value.strip())
            return [f"{pad}{open_tag}>{text}{close_tag}"]

        lines = [f"{pad}{open_tag}>"]
        for child in children:
            lines.extend(self._format_node(child, depth + 1))
        lines.append(f"{pad}{close_tag}")
        return lines

    def _format_node(self, node: Node, depth: int) -> list[str]:
        if isinstance(node, Element):
            return self._format_element(node, depth)
        pad = self.indent * depth
        if isinstance(node, VerbatimBlock):
            return [f"{pad}<![CDATA[{normalize_verbatim(node.value)}]]>"]
        return [f"{pad}{escape_xml(node.value.strip())}"]


def _is_blank(node: Node) -> bool:
    return isinstance(node, Text) and node.is_blank


def _merge_text(children: list[Node]) -> list[Node]:
    """Join runs of adjacent Text nodes, as a parser would deliver them."""
    merged: list[Node] = []
    for child in children:
        if isinstance(child, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(merged[-1].value + child.value)
        else:
            merged.append(child)
    return merged


def format_document(
    tree: Document | Element,
    indent: str = DEFAULT_INDENT,
    declaration: str = DEFAULT_DECLARATION,
    verbatim_containers: tuple[str, ...] | list[str] = DEFAULT_VERBATIM_CONTAINERS,
) -> str:
    """
    Format a tree with a one-off ``CanonicalFormatter``.

    Args:
        tree: Document or bare root Element
        indent: Indent unit repeated once per depth level
        declaration: XML declaration line prepended to the output
        verbatim_containers: Local names whose CDATA content is emitted alone

    Returns:
        Canonical text ending in a single newline
    """
    formatter = CanonicalFormatter(
        indent=indent, declaration=declaration, verbatim_containers=verbatim_containers
    )
    return formatter.format(tree)
