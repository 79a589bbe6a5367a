"""
ActionQueue - Pending commands between two ticks.

Admission only checks the shape of an action (kind known, parameters
non-negative integers). Everything that depends on the castle state is
checked again when the queue is drained, because gold and workforce may have
changed between submission and application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from .core.actions import Action
from .core.types import EnqueueResult


@dataclass
class QueuedAction:
    """An admitted action and the turn that was current when it was queued."""
    action: Action
    queued_at_turn: int

    def to_dict(self) -> Dict[str, Any]:
        data = self.action.to_dict()
        data["queued_at_turn"] = self.queued_at_turn
        return data


class ActionQueue:
    """
    Insertion-ordered buffer of admitted actions.

    Not thread-safe on its own; the engine serializes access.
    """

    def __init__(self):
        self._items: List[QueuedAction] = []

    def admit(self, action: Union[Action, Dict[str, Any]], current_turn: int) -> EnqueueResult:
        """
        Syntactically validate and append an action.

        Args:
            action: An Action, or its dict form as received over the wire
            current_turn: Turn number of the current state

        Returns:
            EnqueueResult; refused actions are never queued
        """
        # Always rebuilt: the queue owns a checked copy.
        data = action.to_dict() if isinstance(action, Action) else action
        try:
            action = Action.from_dict(data)
        except ValueError as exc:
            return EnqueueResult.refused(str(exc))

        self._items.append(QueuedAction(action=action, queued_at_turn=current_turn))
        return EnqueueResult.admitted(current_turn + 1)

    def drain(self) -> List[Action]:
        """Remove and return every queued action in submission order."""
        drained = [item.action for item in self._items]
        self._items.clear()
        return drained

    def pending(self) -> List[QueuedAction]:
        """Copies of the queued actions (the queue itself is left untouched)."""
        return [
            QueuedAction(action=Action.from_dict(item.action.to_dict()), queued_at_turn=item.queued_at_turn)
            for item in self._items
        ]

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
