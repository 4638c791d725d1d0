from app.schemas import DataMappingEntry
from app.services.data_mapping import map_response, merge_request_data, render_template, resolve_path


def test_merge_overwrites_existing_keys_and_appends_new_ones():
    data = {"customer": "ACME", "amount": 10}
    merged = merge_request_data(data, {"amount": 25, "currency": "USD"})

    assert merged == {"customer": "ACME", "amount": 25, "currency": "USD"}
    assert list(merged) == ["customer", "amount", "currency"]
    assert data == {"customer": "ACME", "amount": 10}


def test_merge_into_empty_document():
    assert merge_request_data(None, {"a": 1}) == {"a": 1}


def test_resolve_path_walks_dicts_and_lists():
    payload = {"data": [{"id": 7, "tags": ["x", "y"]}], "meta": {"total": 1}}

    assert resolve_path(payload, "meta.total") == 1
    assert resolve_path(payload, "data.0.id") == 7
    assert resolve_path(payload, "data.0.tags.-1") == "y"
    assert resolve_path(payload, "data.3.id") is None
    assert resolve_path(payload, "meta.missing", default="n/a") == "n/a"
    assert resolve_path(payload, "") is payload
    assert resolve_path(payload, ".") is payload


def test_render_template_keeps_types_for_whole_placeholders():
    context = {"customer": {"id": 42, "name": "ACME"}, "items": [1, 2]}

    assert render_template("{{ customer.id }}", context) == 42
    assert render_template("{{items}}", context) == [1, 2]
    assert render_template("/customers/{{ customer.id }}/orders", context) == "/customers/42/orders"
    assert render_template("{{ unknown }}", context) == ""
    assert render_template("name={{ unknown }}", context) == "name="


def test_render_template_recurses_into_structures():
    context = {"q": "lamps", "limit": 5}
    template = {"search": "{{ q }}", "page": {"size": "{{ limit }}"}, "fixed": True, "list": ["{{ q }}"]}

    assert render_template(template, context) == {
        "search": "lamps",
        "page": {"size": 5},
        "fixed": True,
        "list": ["lamps"],
    }


def test_map_response_builds_updates_from_entries():
    response = {"results": [{"email": "a@example.com"}], "count": 1}
    mappings = [
        DataMappingEntry(key="firstEmail", value="results.0.email"),
        DataMappingEntry(key="count", value="count"),
        DataMappingEntry(key="raw"),
    ]

    assert map_response(response, mappings) == {
        "firstEmail": "a@example.com",
        "count": 1,
        "raw": response,
    }
