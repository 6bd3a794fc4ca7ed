"""
Subset the Communication and DataTypeTemplates sections for one device.

Both filters take a section from the source document, clone it, and rebuild
child lists with list comprehensions. The source tree is never modified and no
list is mutated while it is being iterated.
"""

import logging

from scd_extract.closure import TypeClosure
from scd_extract.model import Element

logger = logging.getLogger(__name__)

ENUM_POLICIES = ("preserve", "prune")


def filter_communication(communication: Element | None, device_name: str) -> Element | None:
    """
    Keep only the SubNetworks and ConnectedAPs that belong to ``device_name``.

    A ConnectedAP survives when its ``iedName`` equals the device name. A
    SubNetwork survives when at least one ConnectedAP survives. Other children
    (Text, BitRate, Private) are kept in place.

    Args:
        communication: Communication element, or None if the document has none
        device_name: Name of the IED being extracted

    Returns:
        Filtered clone, or None when there is no section or nothing survives
    """
    if communication is None:
        return None

    section = communication.clone()
    retained_subnets = 0
    children = []
    for child in section.children:
        if isinstance(child, Element) and child.local_name == "SubNetwork":
            subnet = _filter_subnetwork(child, device_name)
            if subnet is None:
                continue
            retained_subnets += 1
            children.append(subnet)
        else:
            children.append(child)
    section.children = children

    if not retained_subnets:
        logger.debug(f"No ConnectedAP for {device_name}; dropping Communication")
        return None
    return section


def _filter_subnetwork(subnet: Element, device_name: str) -> Element | None:
    subnet.children = [
        child
        for child in subnet.children
        if not (
            isinstance(child, Element)
            and child.local_name == "ConnectedAP"
            and child.get("iedName") != device_name
        )
    ]
    if not subnet.child_elements("ConnectedAP"):
        return None
    return subnet


def filter_templates(
    templates: Element | None, closure: TypeClosure, enum_policy: str = "preserve"
) -> Element | None:
    """
    Drop every type definition the device does not reference.

    Args:
        templates: DataTypeTemplates element, or None if the document has none
        closure: Result of ``resolve_type_closure`` for the device
        enum_policy: ``preserve`` keeps all EnumTypes, ``prune`` keeps only
            referenced ones

    Returns:
        Filtered clone in source order, or None when no definition survives
    """
    if enum_policy not in ENUM_POLICIES:
        raise ValueError(f"Unknown enum policy: {enum_policy}")
    if templates is None:
        return None

    section = templates.clone()
    section.children = [
        child
        for child in section.children
        if not isinstance(child, Element) or closure.retains(child, enum_policy)
    ]

    if not section.child_elements("LNodeType", "DOType", "DAType", "EnumType"):
        logger.debug("No type definitions retained; dropping DataTypeTemplates")
        return None
    return section
