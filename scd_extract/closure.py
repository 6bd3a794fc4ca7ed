"""
Compute the DataTypeTemplates definitions a device depends on.

A device's logical nodes name an LNodeType through ``lnType``. From there the
DO/SDO references lead to DOTypes, and DA/BDA references lead to DATypes (or
EnumTypes). The closure is every LNodeType, DOType and DAType id reachable that
way. Traversal uses an id index built once and visits each id at most once, so
it is linear in the size of the library and terminates even on cyclic input.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

from scd_extract.model import Element

logger = logging.getLogger(__name__)

LOGICAL_NODE_TAGS = ("LN0", "LN")

LNODE_TYPE = "LNodeType"
DO_TYPE = "DOType"
DA_TYPE = "DAType"
ENUM_TYPE = "EnumType"
TEMPLATE_KINDS = (LNODE_TYPE, DO_TYPE, DA_TYPE, ENUM_TYPE)


@dataclass(frozen=True)
class DanglingReference:
    """A type reference whose target id is not defined in the library."""

    kind: str  # expected definition kind: LNodeType | DOType | DAType
    type_id: str
    referenced_from: str  # e.g. "LN lnType" or "DOType 'DOT1' DA 'stVal'"


@dataclass
class TypeLibraryIndex:
    """
    Lookup tables from id to definition, one per template kind.

    Example:
        >>> index = TypeLibraryIndex.build(templates)
        >>> index.get("DOType", "myDOType")
        Element(tag='DOType', ...)
    """

    definitions: dict[str, dict[str, Element]] = field(
        default_factory=lambda: {kind: {} for kind in TEMPLATE_KINDS}
    )

    @classmethod
    def build(cls, templates: Element | None) -> "TypeLibraryIndex":
        index = cls()
        if templates is None:
            return index
        for definition in templates.child_elements(*TEMPLATE_KINDS):
            type_id = definition.get("id")
            if type_id is None:
                continue
            # First definition wins on duplicate ids
            index.definitions[definition.local_name].setdefault(type_id, definition)
        return index

    def get(self, kind: str, type_id: str) -> Element | None:
        return self.definitions[kind].get(type_id)


@dataclass
class TypeClosure:
    """Result of closure resolution for one device."""

    logical_node_types: set[str] = field(default_factory=set)
    data_object_types: set[str] = field(default_factory=set)
    data_attribute_types: set[str] = field(default_factory=set)
    enum_types: set[str] = field(default_factory=set)
    dangling: list[DanglingReference] = field(default_factory=list)

    @property
    def members(self) -> set[str]:
        """Ids of every LNodeType, DOType and DAType the device needs."""
        return self.logical_node_types | self.data_object_types | self.data_attribute_types

    def __contains__(self, type_id: str) -> bool:
        return type_id in self.members

    def retains(self, definition: Element, enum_policy: str = "preserve") -> bool:
        """
        Decide whether a DataTypeTemplates child survives filtering.

        Non-type children (Text, Private) are always kept. EnumTypes are kept
        unconditionally under the ``preserve`` policy and only when referenced
        under ``prune``.
        """
        kind = definition.local_name
        type_id = definition.get("id")
        if kind == ENUM_TYPE:
            return enum_policy == "preserve" or type_id in self.enum_types
        if kind in (LNODE_TYPE, DO_TYPE, DA_TYPE):
            return type_id in self.members
        return True


def collect_lnode_type_refs(device: Element) -> list[str]:
    """Distinct ``lnType`` values of every LN0/LN in the device, first-seen order."""
    seen: dict[str, None] = {}
    for ln in device.iter_elements(*LOGICAL_NODE_TAGS):
        ln_type = ln.get("lnType")
        if ln_type:
            seen.setdefault(ln_type, None)
    return list(seen)


def resolve_type_closure(device: Element, templates: Element | None) -> TypeClosure:
    """
    Compute the set of template ids the device transitively references.

    Args:
        device: IED element
        templates: DataTypeTemplates element, or None if the document has none

    Returns:
        TypeClosure with the reachable ids and any dangling references.
        Without a DataTypeTemplates section nothing can resolve, and nothing
        is reported as dangling either.
    """
    resolver = _ClosureResolver(TypeLibraryIndex.build(templates))
    closure = resolver.resolve(collect_lnode_type_refs(device))
    if templates is None:
        closure.dangling.clear()

    for ref in closure.dangling:
        logger.warning(
            f"Unresolved {ref.kind} '{ref.type_id}' referenced from {ref.referenced_from}"
        )
    logger.debug(
        f"Closure for {device.get('name')}: {len(closure.logical_node_types)} LNodeType, "
        f"{len(closure.data_object_types)} DOType, {len(closure.data_attribute_types)} DAType, "
        f"{len(closure.enum_types)} EnumType"
    )
    return closure


class _ClosureResolver:
    def __init__(self, index: TypeLibraryIndex):
        self.index = index
        self.closure = TypeClosure()
        self.pending_attribute_types: deque[tuple[str, str]] = deque()

    def resolve(self, lnode_type_ids: list[str]) -> TypeClosure:
        for ln_type in lnode_type_ids:
            definition = self.index.get(LNODE_TYPE, ln_type)
            if definition is None:
                self._dangling(LNODE_TYPE, ln_type, "LN lnType")
                continue
            self.closure.logical_node_types.add(ln_type)
            for do in definition.child_elements("DO"):
                self._visit_data_object_type(do.get("type"), f"LNodeType '{ln_type}' DO")

        # DATypes are chased only after all DOType traversal is done
        while self.pending_attribute_types:
            type_id, origin = self.pending_attribute_types.popleft()
            self._visit_data_attribute_type(type_id, origin)

        return self.closure

    def _visit_data_object_type(self, type_id: str | None, origin: str) -> None:
        if not type_id or type_id in self.closure.data_object_types:
            return
        definition = self.index.get(DO_TYPE, type_id)
        if definition is None:
            self._dangling(DO_TYPE, type_id, origin)
            return
        self.closure.data_object_types.add(type_id)

        stack = [(type_id, definition)]
        while stack:
            current_id, current = stack.pop()
            for child in current.child_elements("SDO", "DA"):
                ref = child.get("type")
                if not ref:
                    continue
                where = f"DOType '{current_id}' {child.local_name} '{child.get('name', '')}'"
                if child.local_name == "DA":
                    self.pending_attribute_types.append((ref, where))
                    continue
                if ref in self.closure.data_object_types:
                    continue
                nested = self.index.get(DO_TYPE, ref)
                if nested is None:
                    self._dangling(DO_TYPE, ref, where)
                    continue
                self.closure.data_object_types.add(ref)
                stack.append((ref, nested))

    def _visit_data_attribute_type(self, type_id: str, origin: str) -> None:
        if type_id in self.closure.data_attribute_types or type_id in self.closure.enum_types:
            return
        definition = self.index.get(DA_TYPE, type_id)
        if definition is None:
            if self.index.get(ENUM_TYPE, type_id) is not None:
                self.closure.enum_types.add(type_id)
            else:
                self._dangling(DA_TYPE, type_id, origin)
            return
        self.closure.data_attribute_types.add(type_id)
        for bda in definition.child_elements("BDA"):
            ref = bda.get("type")
            if ref:
                where = f"DAType '{type_id}' BDA '{bda.get('name', '')}'"
                self.pending_attribute_types.append((ref, where))

    def _dangling(self, kind: str, type_id: str, origin: str) -> None:
        ref = DanglingReference(kind=kind, type_id=type_id, referenced_from=origin)
        if ref not in self.closure.dangling:
            self.closure.dangling.append(ref)
