"""Tests for the XML body codec."""

from datetime import datetime, timezone

import pytest

from s3kit import BodyCodec, XmlCodec
from s3kit.codec import parse_iso8601


@pytest.fixture
def codec():
    return XmlCodec()


def test_codec_satisfies_port(codec):
    assert isinstance(codec, BodyCodec)


def test_decode_error(codec):
    body = (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b"<Error><Code>NoSuchKey</Code><Message>The resource you requested does not exist</Message>"
        b"<Resource>/mybucket/myfoto.jpg</Resource><RequestId>4442587FB7D0A2F9</RequestId>"
        b"<BucketName>mybucket</BucketName><Key>myfoto.jpg</Key></Error>"
    )
    document = codec.decode_error(body)
    assert document.code == "NoSuchKey"
    assert document.message == "The resource you requested does not exist"
    assert document.resource == "/mybucket/myfoto.jpg"
    assert document.request_id == "4442587FB7D0A2F9"
    assert document.host_id is None
    assert document.bucket == "mybucket"
    assert document.key == "myfoto.jpg"


@pytest.mark.parametrize("body", [b"", b"<Error><Code>", b"<Tagging/>"])
def test_decode_error_rejects_bad_documents(codec, body):
    with pytest.raises(ValueError):
        codec.decode_error(body)


def test_encode_tags(codec):
    body = codec.encode_tags({"a&b": "<c>"})
    assert b'xmlns="http://s3.amazonaws.com/doc/2006-03-01/"' in body
    assert b"<Key>a&amp;b</Key>" in body
    assert b"<Value>&lt;c&gt;</Value>" in body
    assert codec.decode_tags(body) == {"a&b": "<c>"}


def test_encode_empty_tags(codec):
    body = codec.encode_tags({})
    assert b"<TagSet />" in body or b"<TagSet/>" in body
    assert codec.decode_tags(body) == {}


def test_decode_tags_empty_value(codec):
    body = b"<Tagging><TagSet><Tag><Key>flag</Key><Value/></Tag></TagSet></Tagging>"
    assert codec.decode_tags(body) == {"flag": ""}


def test_decode_tags_requires_key(codec):
    with pytest.raises(ValueError, match="Key"):
        codec.decode_tags(b"<Tagging><TagSet><Tag><Value>v</Value></Tag></TagSet></Tagging>")


def test_decode_list_buckets_empty(codec):
    assert codec.decode_list_buckets(b"<ListAllMyBucketsResult/>") == []


def test_decode_list_objects_defaults(codec):
    result = codec.decode_list_objects(
        b"<ListBucketResult><Contents><Key>a</Key></Contents></ListBucketResult>"
    )
    assert [o.name for o in result.objects] == ["a"]
    assert result.objects[0].size == 0
    assert result.objects[0].etag is None
    assert result.prefixes == []
    assert not result.is_truncated
    assert result.next_continuation_token is None


def test_parse_iso8601():
    assert parse_iso8601("2009-10-12T17:50:30.000Z") == datetime(2009, 10, 12, 17, 50, 30, tzinfo=timezone.utc)
    assert parse_iso8601("2009-10-12T17:50:30Z") == datetime(2009, 10, 12, 17, 50, 30, tzinfo=timezone.utc)
    assert parse_iso8601(None) is None
    with pytest.raises(ValueError):
        parse_iso8601("yesterday")
