"""
In-memory tree model for SCL documents.

The extractor never works on the parser's own DOM. Input is converted once into
these dataclasses (see ``scd_extract.parser``) so that filtering, assembly and
formatting only deal with three node kinds: elements, text and verbatim
(CDATA) blocks.
"""

import copy
from dataclasses import dataclass, field
from typing import Iterator, Union


def local_name(tag: str) -> str:
    """Strip a ``prefix:`` from a qualified tag name."""
    return tag.rsplit(":", 1)[-1]


@dataclass
class Text:
    """Character data between tags."""

    value: str

    @property
    def is_blank(self) -> bool:
        return not self.value.strip()


@dataclass
class VerbatimBlock:
    """CDATA section content, emitted without escaping."""

    value: str


@dataclass
class Element:
    """
    An element with ordered attributes and ordered children.

    ``tag`` is kept exactly as it appeared in the source, prefix included.
    Lookups by schema role go through ``local_name`` so prefixed and
    unprefixed documents are handled alike.
    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)

    @property
    def local_name(self) -> str:
        return local_name(self.tag)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def child_elements(self, *names: str) -> list["Element"]:
        """Direct element children, optionally restricted to the given local names."""
        return [
            child
            for child in self.children
            if isinstance(child, Element) and (not names or child.local_name in names)
        ]

    def find(self, name: str) -> "Element | None":
        """First direct child element with the given local name."""
        for child in self.child_elements(name):
            return child
        return None

    def iter_elements(self, *names: str) -> Iterator["Element"]:
        """
        Walk descendant elements depth-first in document order.

        The element itself is not yielded.
        """
        stack = list(reversed(self.child_elements()))
        while stack:
            elem = stack.pop()
            if not names or elem.local_name in names:
                yield elem
            stack.extend(reversed(elem.child_elements()))

    def clone(self) -> "Element":
        return copy.deepcopy(self)


Node = Union[Element, Text, VerbatimBlock]


@dataclass
class Document:
    """A root element plus the XML declaration the source carried, if any."""

    root: Element
    declaration: str | None = None
