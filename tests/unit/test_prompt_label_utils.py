"""
Unit tests for prompt label display helpers.
"""
import uuid

from agent_dashboard_service.models import PromptLabel, PromptVersion
from agent_dashboard_service.utils import (
    filter_prompt_versions_by_label,
    get_prompt_label_display_text,
    get_prompt_label_name,
)


def make_label(name: str) -> PromptLabel:
    return PromptLabel(id=uuid.uuid4(), tenant_id="test-tenant", name=name)


def make_version(number: int, label: PromptLabel = None, attach: bool = False) -> PromptVersion:
    version = PromptVersion(
        id=uuid.uuid4(),
        prompt_id=uuid.uuid4(),
        version=number,
        content=f"v{number}",
        label_id=label.id if label else None,
    )
    if attach:
        version.label = label
    return version


class TestGetPromptLabelName:
    def test_unlabelled_version(self):
        assert get_prompt_label_name(make_version(1), [make_label("production")]) is None

    def test_prefers_provided_labels(self):
        label = make_label("production")
        renamed = PromptLabel(id=label.id, tenant_id="test-tenant", name="prod")
        version = make_version(1, label, attach=True)

        assert get_prompt_label_name(version, [renamed]) == "prod"

    def test_falls_back_to_loaded_label(self):
        label = make_label("staging")
        version = make_version(1, label, attach=True)

        assert get_prompt_label_name(version, []) == "staging"

    def test_unknown_label_without_relationship(self):
        version = make_version(1, make_label("staging"))
        assert get_prompt_label_name(version, []) is None


class TestDisplayText:
    def test_default_fallback(self):
        assert get_prompt_label_display_text(make_version(1), []) == "No Label"

    def test_custom_fallback(self):
        assert get_prompt_label_display_text(make_version(1), [], fallback="-") == "-"

    def test_label_name(self):
        label = make_label("production")
        assert get_prompt_label_display_text(make_version(1, label), [label]) == "production"


class TestFilterByLabel:
    def test_filters_by_label_id(self):
        production = make_label("production")
        staging = make_label("staging")
        versions = [
            make_version(3, production),
            make_version(2),
            make_version(1, staging),
        ]

        assert [v.version for v in filter_prompt_versions_by_label(versions, production.id)] == [3]
        assert [v.version for v in filter_prompt_versions_by_label(versions, None)] == [2]

    def test_no_match(self):
        versions = [make_version(1)]
        assert filter_prompt_versions_by_label(versions, uuid.uuid4()) == []
