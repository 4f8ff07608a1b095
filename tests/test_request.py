import pytest

from scrollex.core.schema import build_projection, build_schema
from scrollex.extractors.elasticsearch.request import build_search_options


def options_for(cfg, query):
    return build_search_options(cfg, build_projection(cfg, build_schema(cfg)), query)


def test_basic_search_options(make_config) -> None:
    cfg = make_config(per_size=50, scroll="5m")
    opts = options_for(cfg, "user:alice")
    assert opts == {
        "index": "docs",
        "scroll": "5m",
        "size": 50,
        "body": {"query": {"query_string": {"query": "user:alice"}}, "sort": ["_doc"]},
        "_source": "n,name",
    }


@pytest.mark.parametrize("query", [None, ""])
def test_match_all_has_no_query_clause(make_config, query) -> None:
    opts = options_for(make_config(), query)
    assert "query" not in opts["body"]


def test_user_sort(make_config) -> None:
    opts = options_for(make_config(sort={"date": "desc", "n": "asc"}), "x")
    assert opts["body"]["sort"] == [{"date": "desc"}, {"n": "asc"}]


def test_index_type(make_config) -> None:
    assert options_for(make_config(index_type="tweet"), "x")["type"] == "tweet"
    assert "type" not in options_for(make_config(), "x")


def test_passthrough_projection_goes_in_body(make_config) -> None:
    cfg = make_config(source_as_json={"includes": ["a.b"], "excludes": ["c"]})
    opts = options_for(cfg, "x")
    assert opts["body"]["_source"] == {"includes": ["a.b"], "excludes": ["c"]}
    assert "_source" not in opts


def test_passthrough_without_projection_fetches_everything(make_config) -> None:
    opts = options_for(make_config(source_as_json={}), "x")
    assert "_source" not in opts["body"]
    assert "_source" not in opts


def test_only_metadata_fields_disables_source(make_config) -> None:
    cfg = make_config(fields=[{"name": "_id", "type": "string", "metadata": True}])
    assert options_for(cfg, "x")["_source"] is False
