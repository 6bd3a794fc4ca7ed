"""
Build a standalone CID document for a single IED.

The new document holds, in order: a clone of the source Header, the filtered
Communication section, a clone of the IED, and the filtered DataTypeTemplates.
Root attributes (version, revision, namespace declarations) are copied as-is so
the result is valid on its own. Sections that filter down to nothing are left
out entirely.
"""

import logging
from dataclasses import dataclass, field

from scd_extract.closure import TypeClosure, resolve_type_closure
from scd_extract.config import ExtractConfig
from scd_extract.exceptions import DanglingReferenceError, DeviceNotFoundError
from scd_extract.filters import filter_communication, filter_templates
from scd_extract.formatter import CanonicalFormatter
from scd_extract.model import Document, Element
from scd_extract.parser import parse_document

logger = logging.getLogger(__name__)


@dataclass
class DeviceSummary:
    """One row of the device picker."""

    name: str
    manufacturer: str
    type: str | None = None
    description: str | None = None


@dataclass
class ExtractionResult:
    """Everything produced by extracting one device."""

    device_name: str
    document: Document
    closure: TypeClosure
    text: str
    filename: str
    warnings: list[str] = field(default_factory=list)


def list_devices(document: Document) -> list[DeviceSummary]:
    """
    List the IEDs of a document, sorted by manufacturer and then name.

    IEDs without a manufacturer sort under an empty string, ahead of the rest.
    """
    devices = [
        DeviceSummary(
            name=ied.get("name", ""),
            manufacturer=ied.get("manufacturer", ""),
            type=ied.get("type"),
            description=ied.get("desc"),
        )
        for ied in document.root.child_elements("IED")
    ]
    return sorted(devices, key=lambda d: (d.manufacturer.casefold(), d.name.casefold()))


def find_device(document: Document, device_name: str) -> Element:
    """
    Return the IED whose ``name`` attribute equals ``device_name``.

    Raises:
        DeviceNotFoundError: If no IED has that name
    """
    devices = {}
    for ied in document.root.child_elements("IED"):
        devices.setdefault(ied.get("name"), ied)

    device = devices.get(device_name)
    if device is None:
        raise DeviceNotFoundError(device_name, sorted(name for name in devices if name))
    return device


def assemble_device_document(
    document: Document,
    device: Element,
    enum_policy: str = "preserve",
    closure: TypeClosure | None = None,
) -> tuple[Document, TypeClosure]:
    """
    Assemble a new document containing only what ``device`` needs.

    Args:
        document: Source document (left untouched)
        device: IED element from ``document``
        enum_policy: EnumType handling passed to ``filter_templates``
        closure: Closure already resolved for ``device``; resolved here if None

    Returns:
        Tuple of (new document, closure used to filter DataTypeTemplates)
    """
    source_root = document.root
    device_name = device.get("name", "")
    templates = source_root.find("DataTypeTemplates")
    if closure is None:
        closure = resolve_type_closure(device, templates)

    root = Element(tag=source_root.tag, attributes=dict(source_root.attributes))

    header = source_root.find("Header")
    if header is not None:
        root.children.append(header.clone())

    communication = filter_communication(source_root.find("Communication"), device_name)
    if communication is not None:
        root.children.append(communication)

    root.children.append(device.clone())

    filtered_templates = filter_templates(templates, closure, enum_policy)
    if filtered_templates is not None:
        root.children.append(filtered_templates)

    logger.info(
        f"Assembled {device_name}: {len(root.children)} top-level sections, "
        f"{len(closure.members)} type definitions"
    )
    return Document(root=root, declaration=document.declaration), closure


def output_filename(device_name: str, extension: str = ".cid") -> str:
    """File name an extracted device is saved under."""
    return f"{device_name}{extension}"


def extract_device(
    source: str | bytes | Document, device_name: str, config: ExtractConfig | None = None
) -> ExtractionResult:
    """
    Extract one IED with its communication and type dependencies.

    Args:
        source: SCD text, bytes, or an already parsed Document
        device_name: Name of the IED to extract
        config: Formatter and extraction settings (defaults if None)

    Returns:
        ExtractionResult holding the new document and its canonical text

    Raises:
        MalformedDocumentError: If ``source`` is not well-formed
        DeviceNotFoundError: If the IED does not exist
        DanglingReferenceError: If ``config.strict_references`` is set and a
            type reference cannot be resolved

    Example:
        >>> result = extract_device(scd_text, "IED1")
        >>> result.filename
        'IED1.cid'
    """
    config = config or ExtractConfig()
    document = parse_document(source)
    device = find_device(document, device_name)

    closure = resolve_type_closure(device, document.root.find("DataTypeTemplates"))
    if config.strict_references and closure.dangling:
        ref = closure.dangling[0]
        raise DanglingReferenceError(ref.type_id, ref.kind, ref.referenced_from)

    new_document, _ = assemble_device_document(document, device, config.enum_policy, closure)

    formatter = CanonicalFormatter(
        indent=config.indent,
        declaration=config.declaration,
        verbatim_containers=config.verbatim_containers,
    )
    warnings = [
        f"Unresolved {ref.kind} '{ref.type_id}' referenced from {ref.referenced_from}"
        for ref in closure.dangling
    ]

    return ExtractionResult(
        device_name=device_name,
        document=new_document,
        closure=closure,
        text=formatter.format(new_document),
        filename=output_filename(device_name, config.output_extension),
        warnings=warnings,
    )


def export_device(
    source: str | bytes | Document, device_name: str, config: ExtractConfig | None = None
) -> str:
    """Extract a device and return only the formatted text."""
    return extract_device(source, device_name, config).text
