"""
scd-extract: single-device extraction from IEC 61850 SCL documents.

Takes a substation configuration (SCD) and produces a standalone CID file for
one IED, holding only the parts of the source that IED depends on.

Main features:
- Communication filtering down to the IED's own ConnectedAPs
- DataTypeTemplates pruning by transitive type-reference closure
- Canonical, deterministic XML formatting with CDATA preservation
"""
