"""MultiKeyIndex -- one collection of values, retrievable by several keys.

The index maintains two lookup structures:
  - _entries: forward index, ``id(value)`` -> _Entry (value + derived keys),
    kept in insertion order
  - _owners: reverse index, key -> _Entry that currently owns the key

Keys are derived once per insertion by running every extractor over the
value.  All mutations go through _prepare()/_insert()/_drop(), which keep
both structures in step.  _prepare() does every fallible step (running
extractors, hashing keys, rejecting duplicates) before anything is
written, so a failed add or replace leaves the index unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from multikey_index import telemetry as events
from multikey_index.errors import DuplicateKeyError
from multikey_index.telemetry import (
    IndexEvent,
    IndexEventName,
    NoOpTelemetrySink,
    TelemetrySink,
)

if TYPE_CHECKING:
    from multikey_index.config import IndexConfig

logger = logging.getLogger(__name__)

V = TypeVar("V")

CollisionObserver = Callable[[Hashable, Any, Any], None]

_DUPLICATE_MODES = ("warn", "raise")

_MISSING = object()


@dataclass(eq=False)
class _Entry(Generic[V]):
    value: V
    keys: tuple[Hashable, ...]


class MultiKeyIndex(Generic[V]):
    """In-memory index of values under several independently derived keys.

    Parameters
    ----------
    extractors:
        Ordered, non-empty sequence of pure functions ``value -> key``.
        Every value gets one key per extractor; all keys share a single
        namespace.
    strict_ownership:
        When True (default), removing a value only unbinds the keys that
        still point at it.  A key taken over by a later value after a
        collision stays bound to that later value.  When False, every
        recorded key of the removed value is unbound unconditionally.
    on_duplicate:
        ``"warn"`` (default): a key already owned by another live value is
        taken over by the incoming value and the collision is reported.
        ``"raise"``: the add is rejected with DuplicateKeyError.
    on_collision:
        Optional observer called as ``on_collision(key, incoming, existing)``
        for each collision.  Without one, collisions are logged at WARNING.
    telemetry_sink:
        Optional sink receiving ``index.*`` telemetry events.
    """

    def __init__(
        self,
        extractors: Iterable[Callable[[V], Hashable]],
        *,
        strict_ownership: bool = True,
        on_duplicate: str = "warn",
        on_collision: CollisionObserver | None = None,
        telemetry_sink: TelemetrySink | None = None,
    ) -> None:
        self._extractors = tuple(extractors)
        if not self._extractors:
            raise ValueError("MultiKeyIndex requires at least one extractor")
        for extractor in self._extractors:
            if not callable(extractor):
                raise TypeError(f"Extractor is not callable: {extractor!r}")
        if on_duplicate not in _DUPLICATE_MODES:
            raise ValueError(
                f"on_duplicate must be one of {_DUPLICATE_MODES}, got {on_duplicate!r}"
            )
        self.strict_ownership = strict_ownership
        self.on_duplicate = on_duplicate
        self.on_collision = on_collision
        self.telemetry = telemetry_sink or NoOpTelemetrySink()
        self._entries: dict[int, _Entry[V]] = {}
        self._owners: dict[Hashable, _Entry[V]] = {}

    @classmethod
    def from_config(cls, config: IndexConfig, **overrides: Any) -> MultiKeyIndex[Any]:
        """Build an index whose extractors and policies come from an IndexConfig."""
        from multikey_index.extractors import build_extractors

        options: dict[str, Any] = {
            "strict_ownership": config.strict_ownership,
            "on_duplicate": config.on_duplicate,
        }
        options.update(overrides)
        return cls(build_extractors(config.facets), **options)

    @property
    def extractors(self) -> tuple[Callable[[V], Hashable], ...]:
        return self._extractors

    @property
    def size(self) -> int:
        """Number of live values (not number of keys)."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[V]:
        return self.values()

    def __getitem__(self, key: Hashable) -> V:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={len(self._entries)}, "
            f"facets={len(self._extractors)})"
        )

    def _emit(self, name: IndexEventName, **attrs: Any) -> None:
        self.telemetry.emit(IndexEvent(name=name, attributes=attrs))

    # -- bookkeeping ---------------------------------------------------

    def _prepare(
        self, value: V, displaced: Sequence[_Entry[V]] = ()
    ) -> tuple[tuple[Hashable, ...], list[tuple[Hashable, _Entry[V]]]]:
        """Derive keys for *value* and find the live entries they collide with.

        Entries in *displaced* are about to be dropped and never count as
        collisions.  Raises before any mutation on extractor failure,
        unhashable keys, or a rejected duplicate.
        """
        keys = tuple(extract(value) for extract in self._extractors)
        collisions: list[tuple[Hashable, _Entry[V]]] = []
        for key in dict.fromkeys(keys):
            owner = self._owners.get(key)
            if owner is None or owner.value is value:
                continue
            if any(owner is gone for gone in displaced):
                continue
            if self.on_duplicate == "raise":
                raise DuplicateKeyError(key, value, owner.value)
            collisions.append((key, owner))
        return keys, collisions

    def _insert(
        self,
        value: V,
        keys: tuple[Hashable, ...],
        collisions: list[tuple[Hashable, _Entry[V]]],
    ) -> None:
        entry = _Entry(value, keys)
        for key in keys:
            self._owners[key] = entry
        self._entries[id(value)] = entry
        for key, owner in collisions:
            self._report_collision(key, keys.index(key), value, owner.value)

    def _drop(self, entry: _Entry[V]) -> None:
        del self._entries[id(entry.value)]
        for key in entry.keys:
            if self.strict_ownership and self._owners.get(key) is not entry:
                continue
            self._owners.pop(key, None)

    def _report_collision(
        self, key: Hashable, facet: int, incoming: V, existing: V
    ) -> None:
        self._emit(events.DUPLICATE_KEY, key=repr(key), facet=facet)
        if self.on_collision is not None:
            self.on_collision(key, incoming, existing)
        else:
            logger.warning("[duplicate_key] %r: %r replaces %r", key, incoming, existing)

    # -- mutation ------------------------------------------------------

    def add(self, value: V) -> None:
        """Index *value* under one key per extractor.

        A value that is already live has its keys derived afresh: its old
        keys are released and it moves to the end of iteration order.
        """
        previous = self._entries.get(id(value))
        displaced = (previous,) if previous is not None else ()
        keys, collisions = self._prepare(value, displaced)
        if previous is not None:
            self._drop(previous)
        self._insert(value, keys, collisions)
        self._emit(events.ADD, key_count=len(keys), collisions=len(collisions))

    def delete_by_value(self, value: V) -> bool:
        """Remove *value* (matched by identity). Returns False if it is not live."""
        entry = self._entries.get(id(value))
        if entry is None:
            return False
        self._drop(entry)
        self._emit(events.DELETE, by="value", key_count=len(entry.keys))
        return True

    def delete_by_key(self, key: Hashable) -> bool:
        """Remove the value owning *key*, with all its keys. False if *key* is unknown."""
        entry = self._owners.get(key)
        if entry is None:
            return False
        self._drop(entry)
        self._emit(events.DELETE, by="key", key_count=len(entry.keys))
        return True

    def replace(self, key: Hashable, new_value: V) -> bool:
        """Swap the value owning *key* for *new_value*, re-deriving every key.

        The current owner of *key* loses its whole key set, *new_value*
        loses its previous entry if it was live, then *new_value* is added
        at the end of iteration order.  Returns False, changing nothing,
        when *key* is not present.
        """
        owner = self._owners.get(key)
        if owner is None:
            return False
        displaced = [owner]
        previous = self._entries.get(id(new_value))
        if previous is not None and previous is not owner:
            displaced.append(previous)
        keys, collisions = self._prepare(new_value, displaced)
        for entry in displaced:
            self._drop(entry)
        self._insert(new_value, keys, collisions)
        self._emit(
            events.REPLACE,
            key=repr(key),
            same_value=owner.value is new_value,
            collisions=len(collisions),
        )
        return True

    def clear(self) -> None:
        """Drop every entry from both indexes."""
        count = len(self._entries)
        self._entries.clear()
        self._owners.clear()
        self._emit(events.CLEAR, removed=count)

    # -- lookup --------------------------------------------------------

    def has(self, key: object) -> bool:
        """True if some live value owns *key*.  Unhashable keys are never present."""
        try:
            return key in self._owners
        except TypeError:
            return False

    def get(self, key: object, default: Any = None) -> Any:
        """Return the value owning *key*, or *default* when the key is unknown.

        Unhashable keys can never be present, so they also yield *default*.
        """
        try:
            entry = self._owners.get(key)
        except TypeError:
            return default
        if entry is None:
            return default
        return entry.value

    def keys_for(self, value: V) -> tuple[Hashable, ...] | None:
        """Return the keys recorded for a live *value*, or None."""
        entry = self._entries.get(id(value))
        if entry is None:
            return None
        return entry.keys

    # -- iteration -----------------------------------------------------

    def _snapshot(self) -> list[_Entry[V]]:
        return list(self._entries.values())

    def keys(self) -> Iterator[tuple[Hashable, ...]]:
        """Yield each live value's key tuple, in insertion order."""
        for entry in self._snapshot():
            yield entry.keys

    def values(self) -> Iterator[V]:
        """Yield each live value once, in insertion order."""
        for entry in self._snapshot():
            yield entry.value

    def entries(self) -> Iterator[tuple[tuple[Hashable, ...], V]]:
        """Yield ``(keys, value)`` pairs, in insertion order."""
        for entry in self._snapshot():
            yield entry.keys, entry.value

    def for_each(
        self, callback: Callable[[V, tuple[Hashable, ...], MultiKeyIndex[V]], Any]
    ) -> None:
        """Call ``callback(value, keys, index)`` once per live value."""
        for keys, value in self.entries():
            callback(value, keys, self)
