import pytest
import requests
from unittest.mock import MagicMock

from cms_client import CMSRequestError, StrapiClient, encode_query, unwrap


def _response(status=200, body=None, reason="OK"):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    if body is None:
        resp.json.side_effect = ValueError("no json")
        resp.text = "<html>oops</html>"
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def client(session):
    return StrapiClient(base_url="http://cms.test/", token="secret", timeout=5, session=session)


def test_encode_query_nested_filters():
    params = encode_query(filters={"mannschaft": {"$eq": "m1"}, "liga": {"id": {"$in": [1, 2]}}})
    assert ("filters[mannschaft][$eq]", "m1") in params
    assert ("filters[liga][id][$in][0]", "1") in params
    assert ("filters[liga][id][$in][1]", "2") in params


def test_encode_query_populate_sort_and_paging():
    assert encode_query(populate="*") == [("populate", "*")]
    params = encode_query(populate=["liga", "saison"], sort="name:asc", page_size=50)
    assert params == [
        ("populate[0]", "liga"),
        ("populate[1]", "saison"),
        ("sort", "name:asc"),
        ("pagination[pageSize]", "50"),
    ]


def test_encode_query_booleans_lowercase():
    assert encode_query(filters={"aktiv": {"$eq": True}}) == [("filters[aktiv][$eq]", "true")]


def test_unwrap_requires_data_envelope():
    assert unwrap({"data": [1], "meta": {}}) == [1]
    with pytest.raises(CMSRequestError):
        unwrap({"results": []})


def test_token_sets_bearer_header(client, session):
    assert session.headers["Authorization"] == "Bearer secret"
    assert client.base_url == "http://cms.test"


def test_find_many_unwraps_data(client, session):
    session.request.return_value = _response(body={"data": [{"id": 1}], "meta": {}})

    result = client.find_many("spiele", filters={"status": {"$eq": "geplant"}}, populate="*")

    assert result == [{"id": 1}]
    method, url = session.request.call_args[0]
    assert method == "GET"
    assert url == "http://cms.test/api/spiele"
    assert ("filters[status][$eq]", "geplant") in session.request.call_args[1]["params"]
    assert session.request.call_args[1]["timeout"] == 5


def test_find_one_returns_none_on_404(client, session):
    session.request.return_value = _response(
        404, {"data": None, "error": {"status": 404, "name": "NotFoundError", "message": "Not Found"}}, "Not Found"
    )
    assert client.find_one("clubs", 99) is None


def test_create_posts_data_envelope(client, session):
    session.request.return_value = _response(body={"data": {"id": 5, "documentId": "abc"}})

    record = client.create("spiele", {"datum": "2025-08-17T15:00:00Z"})

    assert record["id"] == 5
    assert session.request.call_args[1]["json"] == {"data": {"datum": "2025-08-17T15:00:00Z"}}


def test_strapi_error_body_becomes_cms_error(client, session):
    session.request.return_value = _response(400, {
        "data": None,
        "error": {
            "status": 400,
            "name": "ValidationError",
            "message": "heimclub must be defined.",
            "details": {"errors": [{"path": ["heimclub"]}]},
        },
    }, "Bad Request")

    with pytest.raises(CMSRequestError) as exc_info:
        client.create("spiele", {})

    err = exc_info.value
    assert err.status == 400
    assert err.message == "heimclub must be defined."
    assert err.details == {"errors": [{"path": ["heimclub"]}]}
    assert str(err) == "HTTP 400: heimclub must be defined."


def test_non_json_error_body(client, session):
    session.request.return_value = _response(502, None, "Bad Gateway")

    with pytest.raises(CMSRequestError) as exc_info:
        client.get("spiele")

    assert exc_info.value.status == 502
    assert exc_info.value.details == "<html>oops</html>"


def test_transport_failure_wrapped(client, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(CMSRequestError) as exc_info:
        client.get("saisons")

    assert exc_info.value.status is None
    assert "refused" in str(exc_info.value)


def test_context_manager_closes_session(session):
    with StrapiClient(base_url="http://cms.test", token="", session=session):
        pass
    session.close.assert_called_once()
    assert "Authorization" not in session.headers


def test_update_puts_to_document(client, session):
    session.request.return_value = _response(body={"data": {"id": 5, "status": "beendet"}})

    record = client.update("spiele", "abc", {"status": "beendet"})

    assert record["status"] == "beendet"
    method, url = session.request.call_args[0]
    assert (method, url) == ("PUT", "http://cms.test/api/spiele/abc")


def test_delete_sends_delete(client, session):
    session.request.return_value = _response(204, body={})

    assert client.delete("tabellen-eintraege", "xyz") is None
    method, url = session.request.call_args[0]
    assert (method, url) == ("DELETE", "http://cms.test/api/tabellen-eintraege/xyz")


def test_create_non_json_success_body(client, session):
    session.request.return_value = _response(200, None)

    with pytest.raises(CMSRequestError) as exc_info:
        client.create("spiele", {"status": "geplant"})

    assert exc_info.value.status == 200
    assert exc_info.value.message == "Response is not JSON"
    assert exc_info.value.details == "<html>oops</html>"


def test_update_non_json_success_body(client, session):
    session.request.return_value = _response(200, None)

    with pytest.raises(CMSRequestError):
        client.update("spiele", "abc", {"status": "beendet"})
