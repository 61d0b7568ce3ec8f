"""Tests for the three transform policies."""

import pytest

from contentful_ingest.core.exceptions import TransformError
from contentful_ingest.core.models import ContentTypeSpec, RawEntry
from contentful_ingest.core.transforms import (
    CustomTransform,
    DefaultTransform,
    NoTransform,
    apply_transform,
    resolve_transform,
)


@pytest.fixture
def raw_entry(entry_factory):
    """A raw blog entry."""
    return RawEntry.model_validate(entry_factory("entry1", title="Always Looking", body="Hello"))


class TestResolveTransform:
    """Test policy dispatch from the transform option."""

    def test_absent_is_default(self):
        assert isinstance(resolve_transform(None), DefaultTransform)

    def test_false_disables(self):
        assert isinstance(resolve_transform(False), NoTransform)

    def test_callable_is_custom(self):
        transform = resolve_transform(lambda entry: entry)
        assert isinstance(transform, CustomTransform)

    def test_other_values_rejected(self):
        with pytest.raises(TypeError):
            resolve_transform("flatten")


class TestDefaultTransform:
    """Test flattening of sys and fields."""

    def test_fields_become_top_level(self, raw_entry):
        result = DefaultTransform().apply(raw_entry)

        assert result["title"] == "Always Looking"
        assert result["body"] == "Hello"

    def test_sys_keys_are_kept(self, raw_entry):
        result = DefaultTransform().apply(raw_entry)

        assert result["id"] == "entry1"
        assert result["type"] == "Entry"
        assert result["createdAt"] == "2024-01-01T00:00:00.000Z"
        assert "sys" not in result
        assert "fields" not in result

    def test_only_remote_sys_keys_are_added(self):
        entry = RawEntry.model_validate({"sys": {"id": "a"}, "fields": {"title": "x"}})

        assert DefaultTransform().apply(entry) == {"title": "x", "id": "a"}

    def test_field_wins_on_collision(self, entry_factory):
        entry = RawEntry.model_validate(entry_factory("entry1", id="custom-slug", type="article"))

        result = DefaultTransform().apply(entry)

        assert result["id"] == "custom-slug"
        assert result["type"] == "article"

    def test_input_not_mutated(self, raw_entry):
        before = raw_entry.model_dump()

        result = DefaultTransform().apply(raw_entry)
        result["title"] = "changed"

        assert raw_entry.model_dump() == before


class TestNoTransform:
    """Test the disabled transform."""

    def test_keeps_api_shape(self, raw_entry):
        result = NoTransform().apply(raw_entry)

        assert isinstance(result["sys"], dict)
        assert isinstance(result["fields"], dict)
        assert result["fields"]["title"] == "Always Looking"
        assert "title" not in result

    def test_raw_record_unchanged(self):
        record = {"sys": {"id": "a"}, "fields": {"title": "x"}}

        assert NoTransform().apply(RawEntry.model_validate(record)) == record

    def test_returns_copy(self, raw_entry):
        result = NoTransform().apply(raw_entry)
        result["fields"]["title"] = "changed"

        assert raw_entry.fields["title"] == "Always Looking"


class TestCustomTransform:
    """Test user supplied transforms."""

    def test_return_value_is_used(self, raw_entry):
        def add_doge(entry):
            entry["doge"] = "wow"
            return entry

        result = CustomTransform(add_doge).apply(raw_entry)

        assert result["doge"] == "wow"
        assert result["fields"]["title"] == "Always Looking"

    def test_arbitrary_shapes_allowed(self, raw_entry):
        result = CustomTransform(lambda entry: entry["fields"]["title"].upper()).apply(raw_entry)

        assert result == "ALWAYS LOOKING"

    def test_mutation_does_not_reach_raw_entry(self, raw_entry):
        def clobber(entry):
            entry["fields"].clear()
            return entry

        CustomTransform(clobber).apply(raw_entry)

        assert raw_entry.fields["title"] == "Always Looking"

    def test_errors_wrapped(self, raw_entry):
        def broken(entry):
            raise KeyError("slug")

        with pytest.raises(TransformError) as exc_info:
            CustomTransform(broken).apply(raw_entry)

        assert isinstance(exc_info.value.cause, KeyError)
        assert "entry1" in str(exc_info.value)


class TestApplyTransform:
    """Test applying a spec's policy to one entry."""

    def test_uses_spec_policy(self, raw_entry):
        spec = ContentTypeSpec(name="blogs", id="blog", transform=False)

        assert "sys" in apply_transform(spec, raw_entry)

    def test_error_names_content_type(self, raw_entry):
        spec = ContentTypeSpec(name="blogs", id="blog", transform=lambda entry: 1 / 0)

        with pytest.raises(TransformError) as exc_info:
            apply_transform(spec, raw_entry)

        assert exc_info.value.content_type == "blogs"
