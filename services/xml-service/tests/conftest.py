import pytest


REQUEST_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="request">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="caNo" type="xs:string"/>
        <xs:element name="zip" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""


@pytest.fixture
def schema_path(tmp_path):
    """XSD for a validate request: <request><caNo/><zip/></request>"""
    path = tmp_path / "request.xsd"
    path.write_text(REQUEST_XSD)
    return str(path)
