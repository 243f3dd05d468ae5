"""Per-chat dialogue state kept in memory."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Hashable, Optional


class StateKind(Enum):
    START = auto()
    RECEIVE_COCKTAIL_NAME = auto()
    RECEIVED_COCKTAIL_NAME = auto()


@dataclass(frozen=True)
class State:
    """Dialogue state; only RECEIVED_COCKTAIL_NAME carries a cocktail name."""

    kind: StateKind = StateKind.START
    cocktail_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is StateKind.RECEIVED_COCKTAIL_NAME:
            if self.cocktail_name is None:
                raise ValueError("received cocktail name state needs a cocktail name")
        elif self.cocktail_name is not None:
            raise ValueError(f"state {self.kind.name} carries no cocktail name")


class DialogueStorage:
    """In-memory store of dialogue states keyed by chat id."""

    def __init__(self) -> None:
        self._states: dict[Hashable, State] = {}

    def get(self, chat_id) -> State:
        """The chat's state, the start state when none is stored."""
        return self._states.get(chat_id, State())

    def update(self, chat_id, state: State) -> None:
        self._states[chat_id] = state

    def exit(self, chat_id) -> None:
        """Forget the chat's state, returning it to the start."""
        self._states.pop(chat_id, None)