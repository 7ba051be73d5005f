"""Character counter shown under name inputs as they approach their limit."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CharacterCounter:
    text: str
    is_warning: bool
    is_error: bool


def character_counter(current_length: int, *, limit: int, warn_after: int) -> CharacterCounter:
    return CharacterCounter(
        text=f"{current_length}/{limit}",
        is_warning=current_length > warn_after,
        is_error=current_length >= limit,
    )
