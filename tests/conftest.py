"""
Shared XML fixtures
"""
import pytest

from uad_xpath_mapper.backend.config import XPathOptions

MISMO_NS = "urn:mismo:residential:2009"

# Undeclared prefix, as hand-edited feeds often arrive
ADJACENCY_XML = "<d:PROPERTY><d:IMAGE><d:Category>Front</d:Category></d:IMAGE></d:PROPERTY>"

VALUATION_USE_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<d:VALUATION xmlns:d="{MISMO_NS}">
  <d:PROPERTY>
    <d:IMAGE ValuationUseType="Exterior">
      <d:Caption>Front view</d:Caption>
    </d:IMAGE>
    <d:IMAGE ValuationUseType="Interior">
      <d:Caption>Kitchen</d:Caption>
    </d:IMAGE>
  </d:PROPERTY>
</d:VALUATION>
"""


def _property_block(n: int) -> str:
    return f"""
    <d:PROPERTY>
      <d:IMAGE>
        <d:ImageCategoryType>Front</d:ImageCategoryType>
        <d:ImageFileLocationIdentifier>p{n}-front.jpg</d:ImageFileLocationIdentifier>
      </d:IMAGE>
      <d:IMAGE>
        <d:ImageCategoryType>Rear</d:ImageCategoryType>
        <d:ImageFileLocationIdentifier>p{n}-rear.jpg</d:ImageFileLocationIdentifier>
      </d:IMAGE>
    </d:PROPERTY>"""


CATEGORY_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<d:VALUATION xmlns:d="{MISMO_NS}">
  <d:PROPERTIES>{''.join(_property_block(n) for n in (1, 2, 3))}
  </d:PROPERTIES>
</d:VALUATION>
"""

MIXED_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<d:VALUATION xmlns:d="{MISMO_NS}">
  <d:REPORT>
    <d:FormType>1004</d:FormType>
  </d:REPORT>
  <d:PROPERTY>
    <!-- subject -->
    <d:Address>12 Main St</d:Address>
    <d:Empty/>
    <d:Blank>   </d:Blank>
  </d:PROPERTY>
</d:VALUATION>
"""


@pytest.fixture
def no_predicates():
    return XPathOptions(predicate_attribute_name="", filter_child_type="")


@pytest.fixture
def plain_options():
    return XPathOptions(composite_grouping=False)
