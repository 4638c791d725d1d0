from app.errors import format_validation_errors


def test_format_validation_errors_groups_by_field():
    errors = [
        {"loc": ("body", "title"), "msg": "field required", "type": "value_error.missing"},
        {"loc": ("body", "title"), "msg": "too long", "type": "value_error"},
        {"loc": ("query", "page"), "msg": "must be >= 1", "type": "value_error"},
        {"loc": ("body", "data_mapping", 0, "key"), "msg": "field required", "type": "value_error.missing"},
    ]

    assert format_validation_errors(errors) == {
        "title": ["field required", "too long"],
        "page": ["must be >= 1"],
        "data_mapping.0.key": ["field required"],
    }


def test_format_validation_errors_for_whole_body():
    errors = [{"loc": ("body",), "msg": "field required", "type": "value_error.missing"}]

    assert format_validation_errors(errors) == {"body": ["field required"]}
