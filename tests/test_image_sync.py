"""
Test copying image categories between documents
"""
import pytest

from uad_xpath_mapper.backend.errors import InputParseError
from uad_xpath_mapper.backend.image_sync import (
    build_category_index,
    child_text,
    find_images,
    render_document,
    sync_image_categories,
    sync_image_files,
)
from uad_xpath_mapper.backend.xml_parser import XMLParser

from conftest import MISMO_NS

SOURCE_XML = f"""<d:VALUATION xmlns:d="{MISMO_NS}">
  <d:IMAGE><d:MIMETypeIdentifier>image/png</d:MIMETypeIdentifier><d:ImageCategoryType>Front</d:ImageCategoryType></d:IMAGE>
  <d:IMAGE><d:MIMETypeIdentifier>image/png</d:MIMETypeIdentifier><d:ImageCategoryType>Rear</d:ImageCategoryType></d:IMAGE>
  <d:IMAGE><d:MIMETypeIdentifier>image/jpeg</d:MIMETypeIdentifier></d:IMAGE>
</d:VALUATION>"""

TARGET_XML = f"""<d:VALUATION xmlns:d="{MISMO_NS}">
  <d:PROPERTY>
    <d:IMAGE><d:MIMETypeIdentifier>image/png</d:MIMETypeIdentifier><d:ImageCategoryType>Rear</d:ImageCategoryType></d:IMAGE>
    <d:IMAGE><d:MIMETypeIdentifier> image/png </d:MIMETypeIdentifier></d:IMAGE>
    <d:IMAGE><d:MIMETypeIdentifier>image/jpeg</d:MIMETypeIdentifier><d:ImageCategoryType>Side</d:ImageCategoryType></d:IMAGE>
    <d:IMAGE><d:MIMETypeIdentifier>image/gif</d:MIMETypeIdentifier></d:IMAGE>
  </d:PROPERTY>
</d:VALUATION>"""


def test_find_images_in_document_order():
    root = XMLParser.parse_xml(TARGET_XML)
    images = find_images(root)
    assert len(images) == 4
    assert [child_text(i, "mimetypeidentifier") for i in images] == [
        "image/png", "image/png", "image/jpeg", "image/gif"]


def test_category_index_first_wins():
    index = build_category_index(XMLParser.parse_xml(SOURCE_XML))
    assert index == {"image/png": "Front", "image/jpeg": None}


def test_sync_updates_and_creates_categories():
    source = XMLParser.parse_xml(SOURCE_XML)
    target = XMLParser.parse_xml(TARGET_XML)
    assert sync_image_categories(source, target) == 2

    images = find_images(target)
    assert [child_text(i, "ImageCategoryType") for i in images] == ["Front", "Front", "Side", None]
    created = images[1][-1]
    assert created.tag == f"{{{MISMO_NS}}}ImageCategoryType"


def test_sync_is_idempotent():
    source = XMLParser.parse_xml(SOURCE_XML)
    target = XMLParser.parse_xml(TARGET_XML)
    sync_image_categories(source, target)
    assert sync_image_categories(source, target) == 0


def test_sync_creates_child_with_undeclared_prefix():
    source = XMLParser.parse_xml(
        "<d:R><d:IMAGE><d:MIMETypeIdentifier>png</d:MIMETypeIdentifier>"
        "<d:ImageCategoryType>Front</d:ImageCategoryType></d:IMAGE></d:R>")
    target = XMLParser.parse_xml("<d:R><d:IMAGE><d:MIMETypeIdentifier>png</d:MIMETypeIdentifier></d:IMAGE></d:R>")
    assert sync_image_categories(source, target) == 1

    image = find_images(target)[0]
    assert image[-1].tag == "d:ImageCategoryType"
    assert "<d:ImageCategoryType>Front</d:ImageCategoryType>" in render_document(target)


def test_sync_creates_child_without_namespace():
    source = XMLParser.parse_xml("<R><IMAGE><MIMETypeIdentifier>png</MIMETypeIdentifier>"
                                 "<ImageCategoryType>Rear</ImageCategoryType></IMAGE></R>")
    target = XMLParser.parse_xml("<R><IMAGE><MIMETypeIdentifier>png</MIMETypeIdentifier></IMAGE></R>")
    sync_image_categories(source, target)
    assert target[0][-1].tag == "ImageCategoryType"


def test_sync_with_custom_children():
    source = XMLParser.parse_xml("<R><PHOTO><Id>1</Id><Kind>Front</Kind></PHOTO></R>")
    target = XMLParser.parse_xml("<R><PHOTO><Id>1</Id></PHOTO></R>")
    assert sync_image_categories(source, target, image_tag="PHOTO", key_child="Id", category_child="Kind") == 1
    assert target[0].findtext("Kind") == "Front"


def test_sync_image_files(tmp_path):
    source = tmp_path / "source.xml"
    target = tmp_path / "target.xml"
    output = tmp_path / "out" / "synced.xml"
    source.write_text(SOURCE_XML, encoding="utf-8")
    target.write_text(TARGET_XML, encoding="utf-8")

    assert sync_image_files(source, target, output) == 2
    written = XMLParser.load_file(output)
    assert [child_text(i, "ImageCategoryType") for i in find_images(written)][:2] == ["Front", "Front"]
    assert "<d:ImageCategoryType>Rear" in target.read_text(encoding="utf-8")


def test_sync_image_files_rejects_malformed(tmp_path):
    source = tmp_path / "source.xml"
    source.write_text("<broken>", encoding="utf-8")
    target = tmp_path / "target.xml"
    target.write_text(TARGET_XML, encoding="utf-8")
    with pytest.raises(InputParseError):
        sync_image_files(source, target, tmp_path / "out.xml")
