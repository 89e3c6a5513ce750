from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from jobfillr.core.matching_config import get_matching_value

_APOSTROPHE_PATTERN = re.compile(r"[’'`´]")
# Anything that is not a word character, whitespace, "+" or "#" (keeps "c++", "c#").
_PUNCTUATION_PATTERN = re.compile(r"[^\w\s\+#]|_")

_DEFAULT_BOILERPLATE = ("please", "kindly", "required", "optional")
_DEFAULT_STEMS = ("what is", "what are", "whats", "enter", "provide", "list", "your", "the")


@dataclass(frozen=True)
class NormalizationRules:
    boilerplate_tokens: frozenset[str]
    prompt_stems: tuple[str, ...]


@lru_cache(maxsize=1)
def default_rules() -> NormalizationRules:
    boilerplate = get_matching_value("normalization.boilerplate_tokens", list(_DEFAULT_BOILERPLATE))
    stems = get_matching_value("normalization.prompt_stems", list(_DEFAULT_STEMS))
    return NormalizationRules(
        boilerplate_tokens=frozenset(str(token).strip().lower() for token in boilerplate),
        prompt_stems=tuple(" ".join(str(stem).lower().split()) for stem in stems),
    )


def _strip_prompt_stems(text: str, stems: tuple[str, ...]) -> str:
    stripped = True
    while stripped:
        stripped = False
        for stem in stems:
            prefix = f"{stem} "
            if text.startswith(prefix) and len(text) > len(prefix):
                text = text[len(prefix):]
                stripped = True
                break
    return text


def normalize_question(text: str, rules: NormalizationRules | None = None) -> str:
    """Canonical form of a form label: deterministic and idempotent."""
    rules = rules or default_rules()
    lowered = _APOSTROPHE_PATTERN.sub("", text.lower())
    spaced = _PUNCTUATION_PATTERN.sub(" ", lowered)
    tokens = [token for token in spaced.split() if token not in rules.boilerplate_tokens]
    return _strip_prompt_stems(" ".join(tokens), rules.prompt_stems)
