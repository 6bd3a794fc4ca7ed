"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest

from scd_extract.parser import parse_document


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def substation_file(fixtures_dir):
    """Return path to the two-bay substation SCD fixture."""
    return fixtures_dir / "scl" / "substation.scd"


@pytest.fixture
def substation_doc(substation_file):
    """Return the parsed substation fixture."""
    return parse_document(substation_file.read_bytes())


@pytest.fixture
def scenario_a_xml():
    """One device D1 whose only LN type pulls in LNT1 -> DOT1 -> DAT1."""
    return """<?xml version="1.0" encoding="utf-8"?>
<SCL version="2007" revision="B">
  <Header id="scenarioA"/>
  <Communication>
    <SubNetwork name="N1">
      <ConnectedAP iedName="D1" apName="AP1"/>
    </SubNetwork>
    <SubNetwork name="N2">
      <ConnectedAP iedName="D2" apName="AP1"/>
    </SubNetwork>
  </Communication>
  <IED name="D1" manufacturer="M">
    <AccessPoint name="AP1">
      <Server>
        <LDevice inst="LD1">
          <LN lnClass="GGIO" inst="1" lnType="LNT1"/>
        </LDevice>
      </Server>
    </AccessPoint>
  </IED>
  <IED name="D2" manufacturer="M"/>
  <DataTypeTemplates>
    <LNodeType id="LNT1" lnClass="GGIO">
      <DO name="Ind" type="DOT1"/>
    </LNodeType>
    <DOType id="DOT1" cdc="SPS">
      <DA name="stVal" bType="Struct" fc="ST" type="DAT1"/>
    </DOType>
    <DOType id="DOT2" cdc="SPS">
      <DA name="stVal" bType="BOOLEAN" fc="ST"/>
    </DOType>
    <DAType id="DAT1">
      <BDA name="v" bType="BOOLEAN"/>
    </DAType>
  </DataTypeTemplates>
</SCL>
"""
