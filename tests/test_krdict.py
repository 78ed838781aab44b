from __future__ import annotations

import asyncio

import httpx
import pytest
from lxml import etree

from kstudy.krdict import KrdictClient
from kstudy.krdict_xml import parse_krdict_xml

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<channel>
  <title>한국어 기초사전 개발 지원(Open API) - 사전 검색</title>
  <total>2</total>
  <item>
    <target_code>12345</target_code>
    <word>사랑</word>
    <pronunciation>사랑</pronunciation>
    <pos>명사</pos>
    <link>https://krdict.korean.go.kr/dicSearch/SearchView?ParaWordNo=12345</link>
    <sense>
      <sense_order>1</sense_order>
      <definition>어떤 사람이나 존재를 몹시 아끼고 귀중히 여기는 마음.</definition>
      <translation>
        <trans_lang>프랑스어</trans_lang>
        <trans_word>amour</trans_word>
        <trans_dfn>Sentiment de tendresse envers quelqu'un.</trans_dfn>
      </translation>
    </sense>
    <sense>
      <sense_order>2</sense_order>
      <definition>남녀 간의 애정.</definition>
    </sense>
  </item>
  <item>
    <target_code>67890</target_code>
    <word>사랑하다</word>
    <origin></origin>
    <sense>
      <sense_order>1</sense_order>
      <translation>
        <trans_word>aimer</trans_word>
      </translation>
    </sense>
  </item>
</channel>
"""


def test_parse_items_and_senses() -> None:
    entries = parse_krdict_xml(SAMPLE_XML)

    assert [e.target_code for e in entries] == ["12345", "67890"]
    first = entries[0]
    assert first.word == "사랑"
    assert first.pos == "명사"
    assert len(first.senses) == 2
    assert first.senses[0].order == "1"
    assert first.senses[0].translation.word == "amour"
    assert first.senses[0].translation.lang == "프랑스어"
    assert first.senses[1].translation is None

    second = entries[1]
    assert second.origin is None
    assert second.senses[0].translation.word == "aimer"
    assert second.senses[0].translation.definition is None


def test_parse_empty_channel() -> None:
    assert parse_krdict_xml("<channel><total>0</total></channel>") == []
    assert parse_krdict_xml("<error><message>no channel</message></error>") == []


def test_parse_malformed_raises() -> None:
    with pytest.raises(etree.XMLSyntaxError):
        parse_krdict_xml("<channel><item>")


def _client(settings, handler) -> KrdictClient:
    return KrdictClient(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_lookup_sends_fixed_parameters(settings) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, text=SAMPLE_XML)

    result = asyncio.run(_client(settings, handler).lookup("amour", "trans_word", "include"))

    assert result.ok
    assert len(result.entries) == 2
    assert seen == {
        "key": "test-key",
        "q": "amour",
        "part": "trans_word",
        "method": "include",
        "num": "30",
        "sort": "dict",
        "advanced": "y",
        "translated": "y",
        "trans_lang": "3",
    }


def test_lookup_http_error_status(settings) -> None:
    result = asyncio.run(_client(settings, lambda r: httpx.Response(503)).lookup("사랑"))
    assert not result.ok
    assert result.status == 503
    assert result.entries == []


def test_lookup_transport_error(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(_client(settings, handler).lookup("사랑"))
    assert not result.ok
    assert result.status is None


def test_lookup_malformed_body(settings) -> None:
    result = asyncio.run(_client(settings, lambda r: httpx.Response(200, text="<channel>")).lookup("사랑"))
    assert not result.ok
    assert result.status == 200


def test_lookup_zero_matches_is_success(settings) -> None:
    body = "<channel><total>0</total></channel>"
    result = asyncio.run(_client(settings, lambda r: httpx.Response(200, text=body)).lookup("사랑"))
    assert result.ok
    assert result.entries == []
