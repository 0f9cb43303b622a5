"""
Tests for services/xmltv_service.py: render_xmltv().
"""
from datetime import datetime

from lxml import etree

from epgsync.models import CanonicalProgram
from epgsync.services.xmltv_service import render_xmltv

from tests.conftest import SHANGHAI


def _program(channel_id: str, title: str, hour: int) -> CanonicalProgram:
    return CanonicalProgram(
        channel_id=channel_id,
        title=title,
        start_time=datetime(2024, 3, 1, hour, 0, tzinfo=SHANGHAI),
        end_time=datetime(2024, 3, 1, hour, 45, tzinfo=SHANGHAI),
        source_timezone="Asia/Shanghai",
        provider_id="daxiang",
    )


def test_renders_channels_and_programmes():
    document = render_xmltv(
        [_program("henan-tv", "梨园春", 20), _program("henan-tv", "晚间新闻", 22)],
        {"henan-tv": "河南卫视"},
    )
    root = etree.fromstring(document)

    assert root.tag == "tv"
    assert root.get("generator-info-name") == "epgsync"

    channels = root.findall("channel")
    assert [c.get("id") for c in channels] == ["henan-tv"]
    assert channels[0].findtext("display-name") == "河南卫视"

    programmes = root.findall("programme")
    assert [p.findtext("title") for p in programmes] == ["梨园春", "晚间新闻"]
    assert programmes[0].get("start") == "20240301200000 +0800"
    assert programmes[0].get("stop") == "20240301204500 +0800"
    assert programmes[0].get("channel") == "henan-tv"


def test_unlisted_channel_falls_back_to_id():
    root = etree.fromstring(render_xmltv([_program("orphan", "x", 8)], {}))
    assert root.find("channel").findtext("display-name") == "orphan"


def test_special_characters_are_escaped():
    document = render_xmltv([_program("c", "Tom & Jerry <HD>", 9)], {"c": "C"})
    assert b"Tom &amp; Jerry &lt;HD&gt;" in document
    assert etree.fromstring(document).find("programme").findtext("title") == "Tom & Jerry <HD>"


def test_empty_schedule_renders_channel_list_only():
    root = etree.fromstring(render_xmltv([], {"a": "A"}))
    assert len(root.findall("channel")) == 1
    assert root.findall("programme") == []


def test_control_characters_are_stripped_from_text():
    document = render_xmltv([_program("c", "bad\x01title", 9)], {"c": "Chan\x0bnel"})
    root = etree.fromstring(document)

    assert root.find("programme").findtext("title") == "badtitle"
    assert root.find("channel").findtext("display-name") == "Channel"


def test_tab_and_newline_survive_in_titles():
    root = etree.fromstring(render_xmltv([_program("c", "line\tone\nline two", 9)], {"c": "C"}))
    assert root.find("programme").findtext("title") == "line\tone\nline two"
