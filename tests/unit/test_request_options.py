from core.domain.http import EntityResponse, parse_links, parse_total_count
from core.services.request_options import create_request_option, sort_spec


def test_no_options_no_params():
    assert create_request_option(None) == []
    assert create_request_option({}) == []


def test_unrecognized_and_none_values_are_dropped():
    params = create_request_option({"page": 0, "size": None, "filter": "x", "query": "hall"})
    assert params == [("page", "0"), ("query", "hall")]


def test_sort_string_or_list():
    assert create_request_option({"sort": "title,asc"}) == [("sort", "title,asc")]
    assert create_request_option({"sort": ["title,desc", "id"]}) == [("sort", "title,desc"), ("sort", "id")]


def test_sort_spec_adds_secondary_id():
    assert sort_spec("title") == ["title,asc", "id"]
    assert sort_spec("title", ascending=False) == ["title,desc", "id"]
    assert sort_spec("id") == ["id,asc"]
    assert sort_spec("title", secondary=None) == ["title,asc"]


def test_parse_total_count_is_case_insensitive():
    assert parse_total_count({"X-Total-Count": "42"}) == 42
    assert parse_total_count({"x-total-count": "7"}) == 7
    assert parse_total_count({"x-total-count": "many"}) is None
    assert parse_total_count({}) is None


def test_parse_links():
    header = (
        '</api/buildings?page=2&size=20>; rel="next",'
        '</api/buildings?page=0&size=20>; rel="prev",'
        '</api/buildings?page=5&size=20>; rel="last",'
        '</api/buildings?page=0&size=20>; rel="first"'
    )
    assert parse_links(header) == {"next": 2, "prev": 0, "last": 5, "first": 0}
    assert parse_links("") == {}


def test_envelope_clone_keeps_status_and_headers():
    response = EntityResponse(status_code=201, headers={"Link": '</api/x?page=1>; rel="next"'}, body={"id": 1})
    cloned = response.clone(body=["converted"])

    assert cloned.status_code == 201
    assert cloned.body == ["converted"]
    assert response.body == {"id": 1}
    assert cloned.links == {"next": 1}
    assert cloned.header("link") is not None
