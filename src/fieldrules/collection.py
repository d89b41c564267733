"""Ordered error collection returned by FieldValidator.execute()."""

from typing import Any, Iterator


class ErrorCollection:
    """Ordered multimap of field name -> error messages.

    Fields keep the order in which their first message was added, and a
    field may hold several messages.

    Example:
        errors = ErrorCollection()
        errors.add("email", "email is required")
        errors.first("email")  # "email is required"
    """

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, key: str, message: Any) -> None:
        self._messages.setdefault(key, []).append(message)

    def get(self, key: str) -> list[str]:
        """Return all messages for a field (empty list if none)."""
        return list(self._messages.get(key, []))

    def first(self, key: str) -> str | None:
        messages = self._messages.get(key)
        return messages[0] if messages else None

    def has(self, key: str) -> bool:
        return key in self._messages

    def keys(self) -> list[str]:
        return list(self._messages)

    def items(self) -> list[tuple[str, list[str]]]:
        return [(key, list(messages)) for key, messages in self._messages.items()]

    def count(self) -> int:
        """Total number of messages across all fields."""
        return sum(len(messages) for messages in self._messages.values())

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(messages) for key, messages in self._messages.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ErrorCollection({self._messages!r})"
