from __future__ import annotations

import pytest

from crud_api.jsonapi import HTTPError, HTTPRequest, Pagination, RequestURLResolver, StaticResolver
from crud_api.jsonapi.document import parse_linkage_document, parse_resource_document
from crud_api.jsonapi.request import NUMBER_STYLE, Request, parse_pagination, page_url
from crud_api.resources import UserSchema


def test_offset_pagination_parsing():
    page = parse_pagination([("page[offset]", "4"), ("page[limit]", "2")])
    assert page == Pagination(offset=4, limit=2)
    assert page.number == 3
    assert parse_pagination([("include", "sweets")]) is None
    assert parse_pagination([("page[limit]", "2")]) == Pagination(offset=0, limit=2)


def test_number_pagination_is_normalised_to_offsets():
    page = parse_pagination([("page[number]", "3"), ("page[size]", "2")])
    assert page.offset == 4
    assert page.limit == 2
    assert page.style == NUMBER_STYLE


@pytest.mark.parametrize(
    "query",
    [
        [("page[limit]", "0")],
        [("page[offset]", "-1")],
        [("page[limit]", "two")],
        [("page[number]", "1")],
        [("page[offset]", "0"), ("page[size]", "2")],
        [("page[cursor]", "abc")],
    ],
)
def test_invalid_pagination_is_a_bad_request(query):
    with pytest.raises(HTTPError) as excinfo:
        parse_pagination(query)
    assert excinfo.value.status == 400


def test_offset_links():
    links = Pagination(offset=2, limit=2).links(total=5)
    assert links["first"] == {"page[offset]": "0", "page[limit]": "2"}
    assert links["prev"] == {"page[offset]": "0", "page[limit]": "2"}
    assert links["next"] == {"page[offset]": "4", "page[limit]": "2"}
    assert links["last"] == {"page[offset]": "3", "page[limit]": "2"}
    assert "prev" not in Pagination(offset=0, limit=2).links(total=5)
    assert "next" not in Pagination(offset=4, limit=2).links(total=5)
    assert Pagination(offset=3).links(total=5) == {}


def test_number_links():
    links = Pagination(offset=0, limit=2, style=NUMBER_STYLE).links(total=5)
    assert links["first"]["page[number]"] == "1"
    assert links["last"]["page[number]"] == "3"
    assert links["next"]["page[number]"] == "2"
    assert "prev" not in links


def test_page_url_keeps_brackets():
    url = page_url("http://host/v0/users", {"page[offset]": "0", "page[limit]": "2"})
    assert url == "http://host/v0/users?page[offset]=0&page[limit]=2"


def test_request_collects_repeated_query_params():
    http = HTTPRequest.build("get", "/v0/users", query_string="a=1&a=2&page[limit]=1")
    request = Request.from_http(http, {"request_id": "abc"})
    assert http.method == "GET"
    assert request.query["a"] == ["1", "2"]
    assert request.param("a") == "1"
    assert request.param("missing") is None
    assert request.pagination == Pagination(offset=0, limit=1)
    assert request.context == {"request_id": "abc"}


def test_resolvers():
    plain = HTTPRequest.build("GET", "/", base_url="http://localhost:31415/")
    proxied = HTTPRequest.build(
        "GET", "/", base_url="http://localhost:31415/", headers={"REQUEST_URI": "https://www.example.com/"}
    )
    assert RequestURLResolver().resolve(plain) == "http://localhost:31415"
    assert RequestURLResolver().resolve(proxied) == "https://www.example.com"
    assert StaticResolver("https://api.example.com/").resolve(proxied) == "https://api.example.com"


def test_parse_resource_document():
    obj = parse_resource_document(
        b'{"data": {"type": "users", "id": 1, "attributes": {"user-name": "marvin"},'
        b' "relationships": {"sweets": {"data": [{"type": "chocolates", "id": "1"}]}}}}'
    )
    assert obj.id == "1"
    data = UserSchema().unmarshal(obj)
    assert data.attributes == {"username": "marvin"}
    assert data.references == {"sweets": ["1"]}


@pytest.mark.parametrize(
    "body,status",
    [
        (b"", 400),
        (b"{not json", 400),
        (b'{"data": {"attributes": {}}}', 400),
        (b'{"data": {"type": "chocolates", "attributes": {}}}', 409),
        (b'{"data": {"type": "users", "attributes": {"password": "x"}}}', 400),
        (b'{"data": {"type": "users", "relationships": {"friends": {"data": []}}}}', 400),
        (b'{"data": {"type": "users", "relationships": {"sweets": {"data": [{"type": "users", "id": "1"}]}}}}', 409),
    ],
)
def test_invalid_resource_documents(body, status):
    with pytest.raises(HTTPError) as excinfo:
        UserSchema().unmarshal(parse_resource_document(body))
    assert excinfo.value.status == status
    assert excinfo.value.to_document()["errors"][0]["status"] == str(status)


def test_parse_linkage_document():
    assert [i.id for i in parse_linkage_document(b'{"data": [{"type": "chocolates", "id": "2"}]}')] == ["2"]
    assert [i.id for i in parse_linkage_document(b'{"data": {"type": "chocolates", "id": 3}}')] == ["3"]
    assert parse_linkage_document(b'{"data": []}') == []
    with pytest.raises(HTTPError):
        parse_linkage_document(b"{}")


def test_page_values_beyond_64_bits_are_rejected():
    for query in (
        [("page[offset]", str(2**63)), ("page[limit]", "1")],
        [("page[number]", str(2**62)), ("page[size]", "4")],
    ):
        with pytest.raises(HTTPError) as excinfo:
            parse_pagination(query)
        assert excinfo.value.status == 400
    assert parse_pagination([("page[offset]", str(2**63 - 1)), ("page[limit]", "1")]).offset == 2**63 - 1
