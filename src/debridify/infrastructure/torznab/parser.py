"""Torznab RSS feed -> Candidate list.

Pure parsing, no I/O.
"""

from __future__ import annotations

from datetime import datetime
from xml.etree import ElementTree

from debridify.domain.entities.errors import IndexerError
from debridify.domain.entities.torrents import Candidate

_TORZNAB_ATTR = "{http://torznab.com/schemas/2015/feed}attr"
_PUBDATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"


def _text(item: ElementTree.Element, tag: str) -> str:
    elem = item.find(tag)
    if elem is None or elem.text is None:
        return ""
    return elem.text.strip()


def _to_int(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _torznab_attrs(item: ElementTree.Element) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for attr in item.findall(_TORZNAB_ATTR):
        name = attr.get("name")
        value = attr.get("value")
        if name and value and name not in attrs:
            attrs[name] = value
    return attrs


def _source_name(item: ElementTree.Element) -> str:
    elem = item.find("jackettindexer")
    if elem is None:
        return ""
    return (elem.text or elem.get("id") or "").strip()


def _size(item: ElementTree.Element, attrs: dict[str, str]) -> int:
    size = _to_int(_text(item, "size"))
    if size is None:
        size = _to_int(attrs.get("size"))
    if size is None:
        enclosure = item.find("enclosure")
        if enclosure is not None:
            size = _to_int(enclosure.get("length"))
    return max(size or 0, 0)


def _published_at(item: ElementTree.Element) -> datetime | None:
    raw = _text(item, "pubDate")
    if not raw:
        return None
    try:
        return datetime.strptime(raw, _PUBDATE_FORMAT)
    except ValueError:
        return None


def _categories(item: ElementTree.Element) -> tuple[int, ...]:
    tags: list[int] = []
    for elem in item.findall("category"):
        value = _to_int((elem.text or "").strip())
        if value is not None:
            tags.append(value)
    return tuple(tags)


def parse_item(item: ElementTree.Element) -> Candidate | None:
    """Map one ``<item>`` to a Candidate; None when title or identifier is missing.

    The identifier is ``guid``, then the ``magneturl`` attribute, then ``link``.
    """
    title = _text(item, "title")
    attrs = _torznab_attrs(item)
    identifier = _text(item, "guid") or attrs.get("magneturl", "") or _text(item, "link")
    if not title or not identifier:
        return None

    return Candidate(
        title=title,
        identifier=identifier,
        source_name=_source_name(item),
        size_bytes=_size(item, attrs),
        published_at=_published_at(item),
        category_tags=_categories(item),
    )


def parse_torznab_feed(xml_text: str | bytes, *, indexer: str = "") -> list[Candidate]:
    """Parse a Torznab response body.

    Empty bodies and feeds without a channel yield ``[]``.

    Raises:
        IndexerError: The body is not well-formed XML, or Jackett returned
            an ``<error>`` document.
    """
    if not xml_text or not xml_text.strip():
        return []

    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as e:
        raise IndexerError(f"invalid torznab XML: {e}", indexer=indexer) from e

    if root.tag == "error":
        raise IndexerError(
            f"torznab error {root.get('code', '?')}: {root.get('description', '')}",
            indexer=indexer,
        )

    channel = root.find("channel")
    if channel is None:
        return []

    candidates: list[Candidate] = []
    for item in channel.findall("item"):
        candidate = parse_item(item)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
