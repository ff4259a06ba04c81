"""
Test the command line entry point
"""
import json

import pytest

from uad_xpath_mapper.__main__ import main

from conftest import ADJACENCY_XML, VALUATION_USE_XML


@pytest.fixture
def feed(tmp_path):
    path = tmp_path / "feed.xml"
    path.write_text(VALUATION_USE_XML, encoding="utf-8")
    return path


def test_generate(feed, tmp_path, capsys):
    output = tmp_path / "xpaths.txt"
    assert main(["generate", str(feed), str(output)]) == 0
    assert output.read_text(encoding="utf-8").splitlines() == [
        "Front view : (//d:IMAGE[@ValuationUseType='Exterior'])[1]//d:Caption",
        "Kitchen : (//d:IMAGE[@ValuationUseType='Interior'])[2]//d:Caption",
    ]
    assert "Generated 2 XPath entries" in capsys.readouterr().out


def test_generate_flags(feed, tmp_path):
    output = tmp_path / "xpaths.txt"
    assert main(["generate", str(feed), str(output), "--no-grouping", "--attr", "", "--always-index"]) == 0
    assert output.read_text(encoding="utf-8").splitlines() == [
        "Front view : //d:PROPERTY[1]/d:IMAGE[1]//d:Caption",
        "Kitchen : //d:PROPERTY[1]/d:IMAGE[2]//d:Caption",
    ]


def test_generate_with_config_file(tmp_path):
    source = tmp_path / "feed.xml"
    source.write_text(ADJACENCY_XML, encoding="utf-8")
    config = tmp_path / "defaults.json"
    config.write_text(json.dumps({"includeElements": ["IMAGE"]}), encoding="utf-8")
    output = tmp_path / "xpaths.txt"

    assert main(["generate", str(source), str(output), "-c", str(config)]) == 0
    assert output.read_text(encoding="utf-8") == "Front : //d:IMAGE//d:Category"

    assert main(["generate", str(source), str(output), "-c", str(config), "--include", "PROPERTY"]) == 0
    assert output.read_text(encoding="utf-8") == "Front : //d:PROPERTY//d:Category"


@pytest.mark.parametrize("content, code", [(None, 2), ("<a><b></a>", 2)])
def test_generate_input_errors(tmp_path, content, code):
    source = tmp_path / "feed.xml"
    if content is not None:
        source.write_text(content, encoding="utf-8")
    output = tmp_path / "xpaths.txt"
    assert main(["generate", str(source), str(output)]) == code
    assert not output.exists()


def test_generate_bad_config(feed, tmp_path):
    config = tmp_path / "defaults.json"
    config.write_text("{", encoding="utf-8")
    assert main(["generate", str(feed), str(tmp_path / "out.txt"), "--config", str(config)]) == 1


def test_generate_output_error(feed, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    assert main(["generate", str(feed), str(blocker / "out.txt")]) == 3


def test_mappings(tmp_path, capsys):
    source = tmp_path / "mappings.txt"
    source.write_text("IMG_001 : //d:IMAGE\n# skipped\n", encoding="utf-8")
    output = tmp_path / "ImageMappings.xml"
    assert main(["mappings", str(source), str(output), "-w", "img"]) == 0
    assert "<ACI_TagRedirector>img(IMG_001)</ACI_TagRedirector>" in output.read_text(encoding="utf-8")
    assert "Wrote 1 mappings" in capsys.readouterr().out


def test_sync_images(tmp_path, capsys):
    source = tmp_path / "source.xml"
    source.write_text("<R><IMAGE><MIMETypeIdentifier>png</MIMETypeIdentifier>"
                      "<ImageCategoryType>Front</ImageCategoryType></IMAGE></R>", encoding="utf-8")
    target = tmp_path / "target.xml"
    target.write_text("<R><IMAGE><MIMETypeIdentifier>png</MIMETypeIdentifier></IMAGE></R>", encoding="utf-8")
    output = tmp_path / "synced.xml"
    assert main(["sync-images", str(source), str(target), str(output)]) == 0
    assert "Done. 1 image(s) updated." in capsys.readouterr().out
    assert "<ImageCategoryType>Front</ImageCategoryType>" in output.read_text(encoding="utf-8")


def test_missing_command():
    with pytest.raises(SystemExit):
        main([])
