# src/jasper_defaults/normalizer.py
from __future__ import annotations

import re
from typing import List, Mapping, Sequence, Union

from .errors import InvalidValueError

Domain = Mapping[str, Sequence[str]]


def collapse_whitespace(s: str) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def normalize(label: str, candidate: str, domain: Domain) -> str:
    """
    Return the server's own spelling of `candidate` for control `label`.

    Jasper only accepts values whose whitespace matches its option list exactly,
    so the match ignores whitespace runs but the domain's string is returned.
    """
    wanted = collapse_whitespace(candidate)
    for option in domain.get(label) or ():
        if wanted == option.strip():
            return option
    raise InvalidValueError(label, candidate)


def normalize_values(
    label: str, candidate: str, is_single: bool, domain: Domain
) -> Union[str, List[str]]:
    if is_single:
        return normalize(label, candidate, domain)
    return [normalize(label, piece, domain) for piece in candidate.split(",")]
