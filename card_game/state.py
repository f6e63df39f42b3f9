from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Type, TypeVar

from .errors import StateError

S = TypeVar("S", bound="State")

# Game states are copy-on-write records over a read-only mapping. Transition
# methods on subclasses return new instances; nothing mutates in place, so
# earlier states stay valid after the game has moved on.


class State:
    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(dict(data or {}))

    @classmethod
    def build(cls: Type[S], **fields: Any) -> S:
        return cls(fields)

    # Reading ---------------------------------------------------------

    def fetch(self, key: str) -> Any:
        try:
            return self._data[key]
        except KeyError:
            raise StateError(f"{key} is not available in {type(self).__name__}") from None

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def keys(self) -> Iterator[str]:
        return iter(self._data)

    # Copy-on-write ---------------------------------------------------

    def merge(self: S, **changes: Any) -> S:
        data: Dict[str, Any] = dict(self._data)
        data.update(changes)
        return type(self)(data)

    def delete(self: S, *keys: str) -> S:
        return type(self)({key: value for key, value in self._data.items() if key not in keys})

    def update_in(self: S, key: str, item: Any, fn: Callable[[Any], Any]) -> S:
        """Replace ``self[key][item]`` with ``fn(old)``; ``old`` is None when absent."""
        mapping = dict(self.get(key) or {})
        mapping[item] = fn(mapping.get(item))
        return self.merge(**{key: MappingProxyType(mapping)})

    # Value semantics -------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._data) == dict(other._data)  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = " ".join(f"{key}={value!r}" for key, value in self._data.items())
        return f"<{type(self).__name__} {fields}>"


def frozen_map(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Read-only snapshot of ``mapping`` suitable for storing in a state."""
    return MappingProxyType(dict(mapping))
