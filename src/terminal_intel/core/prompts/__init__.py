"""
Prompt templates and builders for suggestion, translation and explanation requests.
"""

from .templates import (
    PromptTemplate,
    TEMPLATES,
    SUGGESTION_TEMPLATE,
    ERROR_TEMPLATE,
    TRANSLATION_TEMPLATE,
    EXPLANATION_TEMPLATE,
    build_suggestion_prompt,
    build_error_prompt,
    build_translation_prompt,
    build_explanation_prompt,
)

__all__ = [
    "PromptTemplate",
    "TEMPLATES",
    "SUGGESTION_TEMPLATE",
    "ERROR_TEMPLATE",
    "TRANSLATION_TEMPLATE",
    "EXPLANATION_TEMPLATE",
    "build_suggestion_prompt",
    "build_error_prompt",
    "build_translation_prompt",
    "build_explanation_prompt",
]
