from .prompt_label_utils import (
    filter_prompt_versions_by_label,
    get_prompt_label_display_text,
    get_prompt_label_name,
)
from .url_utils import get_domain_from_url

__all__ = [
    "filter_prompt_versions_by_label",
    "get_domain_from_url",
    "get_prompt_label_display_text",
    "get_prompt_label_name",
]
