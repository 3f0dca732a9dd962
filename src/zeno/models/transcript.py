"""Transcript and turn models for Zeno.

Defines the four turn variants as Pydantic models with a discriminated
union (Turn), and the append-only Transcript that owns them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from zeno.exceptions import TranscriptError


# ---------------------------------------------------------------------------
# Turn variants
# ---------------------------------------------------------------------------


class UserText(BaseModel):
    """Text typed by the operator (or a synthetic note on their behalf)."""

    kind: Literal["user_text"] = "user_text"
    text: str


class ModelText(BaseModel):
    """Final text produced by the model."""

    kind: Literal["model_text"] = "model_text"
    text: str


class ModelActionRequest(BaseModel):
    """The model's structured intent to run an action."""

    kind: Literal["action_request"] = "action_request"
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolOutcome(BaseModel):
    """Result of an action, success or failure, as plain text."""

    kind: Literal["tool_outcome"] = "tool_outcome"
    name: str
    result: str


Turn = Annotated[
    Union[UserText, ModelText, ModelActionRequest, ToolOutcome],
    Field(discriminator="kind"),
]

_turns_adapter = TypeAdapter(list[Turn])


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class Transcript:
    """Ordered, append-only sequence of turns.

    Turns are never edited or reordered. The only way to remove turns is
    ``clear()``, which drops the whole history.

    Usage::

        transcript = Transcript()
        transcript.append(UserText(text="hello"))
        data = transcript.to_json()
        restored = Transcript.from_json(data)
    """

    def __init__(self, turns: Iterable[Turn] | None = None) -> None:
        self._turns: list[Turn] = list(turns) if turns is not None else []

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def clear(self) -> None:
        self._turns.clear()

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Snapshot of the current turns."""
        return tuple(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]

    def __repr__(self) -> str:
        return f"Transcript({len(self._turns)} turns)"

    def to_python(self) -> list[dict]:
        """Return JSON-compatible turn records."""
        return _turns_adapter.dump_python(self._turns, mode="json")

    def to_json(self, *, indent: int | None = 2) -> str:
        return _turns_adapter.dump_json(self._turns, indent=indent).decode("utf-8")

    @classmethod
    def from_python(cls, data: object) -> Transcript:
        """Build a transcript from decoded JSON records.

        Raises:
            TranscriptError: If the records do not describe valid turns.
        """
        try:
            return cls(_turns_adapter.validate_python(data))
        except ValidationError as exc:
            raise TranscriptError("<data>", str(exc)) from exc

    @classmethod
    def from_json(cls, data: str | bytes) -> Transcript:
        try:
            return cls(_turns_adapter.validate_json(data))
        except ValidationError as exc:
            raise TranscriptError("<data>", str(exc)) from exc
