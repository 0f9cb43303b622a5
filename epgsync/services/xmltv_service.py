from collections.abc import Mapping, Sequence
from datetime import datetime
import logging
import re

from lxml import etree # type: ignore

from epgsync.models import CanonicalProgram

logger = logging.getLogger(__name__)

GENERATOR_NAME = "epgsync"

# Characters outside the XML 1.0 Char production
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def render_xmltv(programs: Sequence[CanonicalProgram], channels: Mapping[str, str]) -> bytes:
    """
    Render canonical programs as an XMLTV document

    Args:
        programs: Programs in output order
        channels: Channel id -> display name; channels referenced by programs
            but missing here fall back to their id

    Returns:
        UTF-8 encoded XMLTV document
    """
    root = etree.Element('tv')
    root.set('generator-info-name', GENERATOR_NAME)

    channel_names = dict(channels)
    for program in programs:
        channel_names.setdefault(program.channel_id, program.channel_id)

    for channel_id, display_name in channel_names.items():
        channel = etree.SubElement(root, 'channel', id=channel_id)
        _add_text(channel, 'display-name', display_name or channel_id)

    for program in programs:
        programme = etree.SubElement(
            root,
            'programme',
            start=_format_xmltv_time(program.start_time),
            stop=_format_xmltv_time(program.end_time),
            channel=program.channel_id,
        )
        _add_text(programme, 'title', program.title)

    logger.debug(f"Rendered XMLTV: {len(channel_names)} channels, {len(programs)} programs")

    return etree.tostring(root, xml_declaration=True, encoding='UTF-8', pretty_print=True)


def _format_xmltv_time(value: datetime) -> str:
    """Format a datetime like '20080715003000 -0600'"""
    return value.strftime('%Y%m%d%H%M%S %z')


def _add_text(parent: etree._Element, tag: str, text: str) -> etree._Element:
    child = etree.SubElement(parent, tag)
    cleaned = XML_ILLEGAL_CHARS.sub("", text)
    if cleaned != text:
        logger.debug(f"Stripped XML-illegal characters from <{tag}>: {text!r}")
    child.text = cleaned
    return child
