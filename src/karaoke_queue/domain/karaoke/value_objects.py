"""Immutable value objects for the karaoke bounded context."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from karaoke_queue.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class VideoId:
    """Stable identifier of a video, e.g. the 11-character YouTube id."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_VIDEO_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)


# JSON carries the bare id string.
VideoIdField = Annotated[
    VideoId,
    PlainValidator(lambda v: VideoId(v) if isinstance(v, str) else v),
    PlainSerializer(lambda v: v.value, return_type=str),
]


class CodeAlphabet(Enum):
    """Character sets a session code can be drawn from."""

    NUMERIC = "numeric"
    ALPHANUMERIC = "alphanumeric"

    @property
    def characters(self) -> str:
        if self is CodeAlphabet.NUMERIC:
            return "0123456789"
        # No 0/O or 1/I so codes survive being read aloud.
        return "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"

    @property
    def min_length(self) -> int:
        return 4 if self is CodeAlphabet.NUMERIC else 6


def generate_session_code(
    length: int = 4,
    alphabet: CodeAlphabet = CodeAlphabet.NUMERIC,
    rng: random.Random | None = None,
) -> str:
    """Draw a random session code such as ``"0427"`` or ``"K7M2QX"``."""
    if length < alphabet.min_length:
        raise ValueError(
            f"{alphabet.value} session codes need at least {alphabet.min_length} characters"
        )
    chooser = rng or random
    return "".join(chooser.choice(alphabet.characters) for _ in range(length))


def normalize_session_code(raw: str) -> str:
    """Canonical form of a user-typed session code (trimmed, upper-case)."""
    return raw.strip().upper()
