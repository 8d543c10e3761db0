"""Authenticated principal."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Opaque id of the user making the request."""

    user_id: str

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("Identity requires a user id")

    def __str__(self) -> str:
        return self.user_id
