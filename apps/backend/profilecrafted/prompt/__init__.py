from .essay import (
    build_essay_prompt,
    strongest_categories,
    SYSTEM_INSTRUCTION,
    REGENERATION_SYSTEM_INSTRUCTION,
)

__all__ = [
    "build_essay_prompt",
    "strongest_categories",
    "SYSTEM_INSTRUCTION",
    "REGENERATION_SYSTEM_INSTRUCTION",
]
