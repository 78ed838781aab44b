"""Convert KRDict search XML into :class:`Entry` values."""

from typing import List, Optional

from lxml import etree

from .models import Entry, Sense, Translation


def _text(node, tag: str) -> Optional[str]:
    child = node.find(tag)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def _parse_sense(node) -> Sense:
    tr = node.find("translation")
    translation = None
    if tr is not None:
        translation = Translation(
            lang=_text(tr, "trans_lang"),
            word=_text(tr, "trans_word"),
            definition=_text(tr, "trans_dfn"),
        )
    return Sense(
        order=_text(node, "sense_order"),
        definition=_text(node, "definition"),
        translation=translation,
    )


def parse_krdict_xml(xml) -> List[Entry]:
    """Parse a KRDict response body.

    Raises ``lxml.etree.XMLSyntaxError`` on a malformed document. A document
    without a ``channel`` or without ``item`` children yields ``[]``.
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    root = etree.fromstring(xml, parser=parser)
    channel = root if root.tag == "channel" else root.find("channel")
    if channel is None:
        return []

    entries = []
    for item in channel.findall("item"):
        entries.append(
            Entry(
                target_code=_text(item, "target_code") or "",
                word=_text(item, "word") or "",
                pos=_text(item, "pos"),
                origin=_text(item, "origin"),
                pronunciation=_text(item, "pronunciation"),
                link=_text(item, "link"),
                senses=tuple(_parse_sense(s) for s in item.findall("sense")),
            )
        )
    return entries
