"""Helpers for presenting prompt versions by their label."""

from typing import Iterable, List, Optional
from uuid import UUID

from ..models import PromptLabel, PromptVersion


def get_prompt_label_name(
    version: PromptVersion, labels: Iterable[PromptLabel]
) -> Optional[str]:
    """
    Resolve the label name of a version.

    The label is looked up by id in ``labels`` first, then taken from the
    version's own loaded label.
    """
    if not version.label_id:
        return None

    for label in labels:
        if label.id == version.label_id:
            return label.name

    # Only use the relationship if it is already loaded
    label = version.__dict__.get("label")
    return label.name if label is not None else None


def get_prompt_label_display_text(
    version: PromptVersion, labels: Iterable[PromptLabel], fallback: str = "No Label"
) -> str:
    return get_prompt_label_name(version, labels) or fallback


def filter_prompt_versions_by_label(
    versions: Iterable[PromptVersion], label_id: Optional[UUID]
) -> List[PromptVersion]:
    """Versions carrying ``label_id``; ``None`` selects unlabelled versions."""
    if label_id is None:
        return [version for version in versions if not version.label_id]
    return [version for version in versions if version.label_id == label_id]
