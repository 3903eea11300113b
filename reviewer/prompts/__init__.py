"""Prompt templates for the model calls.

Each module contains the system prompt and user prompt builders for one
kind of call.
"""

from reviewer.prompts.analysis_prompt import (
    ANALYSIS_SYSTEM_PROMPT,
    LOGIC_POINT_CATEGORIES,
    SANITIZED_NOTE,
    build_analysis_prompt,
    build_analysis_user_prompt,
)
from reviewer.prompts.email_prompt import EMAIL_SYSTEM_PROMPT, build_email_prompt

__all__ = [
    # Document analysis
    "ANALYSIS_SYSTEM_PROMPT",
    "LOGIC_POINT_CATEGORIES",
    "SANITIZED_NOTE",
    "build_analysis_prompt",
    "build_analysis_user_prompt",
    # Email drafting
    "EMAIL_SYSTEM_PROMPT",
    "build_email_prompt",
]
