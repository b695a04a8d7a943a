"""DataParser: walks a template context into bounded, cycle-safe Descriptor trees.

One root context is split into two trees:

- the *global* pass keeps only the top-level keys in the global-key set;
- the *page* pass keeps only the top-level keys outside it.

Both passes share identity tracking: the page pass starts from a copy of the
global pass's SeenMap, so an object already expanded in the global tree is
reported as CIRCULAR in the page tree instead of being duplicated.

Traversal is bounded by ``ParserConfig.max_depth``: values at that depth are
omitted entirely.  Keys of objects and maps are visited in alphanumeric order
(see ``site_xray.tree.sorting``).  Members of the collections namespace are
summarized (type and length only), never expanded.

Example::

    parser = DataParser()
    parser.set_global_keys(["site"])
    global_tree = await parser.parse_global_data(context)
    page_tree = await parser.parse_page_data(context)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum, auto
from typing import Any

from site_xray.config import ParserConfig
from site_xray.errors import ParserStateError, XrayError
from site_xray.tree.classifier import classify
from site_xray.tree.nodes import DataType, Descriptor
from site_xray.tree.sorting import natural_key
from site_xray.tree.summarizer import summarize

__all__ = ["DataParser", "ParseMode", "SeenMap"]

logger = logging.getLogger(__name__)

# Tags of values that are compared by identity for cycle detection.
_REFERENCE_TYPES: frozenset[DataType] = frozenset(
    {
        DataType.FUNCTION,
        DataType.INSTANCE,
        DataType.ARRAY,
        DataType.REGEXP,
        DataType.DATE,
        DataType.MAP,
        DataType.SET,
        DataType.OBJECT,
    }
)

# Immutable opaque values that are never identity-tracked.
_UNTRACKED_TYPES: tuple[type, ...] = (bytes, range)


class ParseMode(StrEnum):
    """Which top-level keys a pass keeps.

    - GLOBAL: only keys in the global-key set.
    - PAGE:   only keys outside the global-key set.
    - ALL:    no partition (used by ``parse_value``).
    """

    GLOBAL = auto()
    PAGE = auto()
    ALL = auto()


class SeenMap:
    """Identity-keyed map from visited values to the path of their first visit.

    Entries hold a strong reference to the value so that its ``id()`` cannot
    be recycled by the garbage collector while the map is alive.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[int, tuple[Any, str]] | None = None) -> None:
        self._entries: dict[int, tuple[Any, str]] = dict(entries) if entries else {}

    def __contains__(self, value: Any) -> bool:
        return id(value) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def path_of(self, value: Any) -> str | None:
        """Return the path at which ``value`` was first seen, or None."""
        entry = self._entries.get(id(value))
        return entry[1] if entry is not None else None

    def register(self, value: Any, path: str) -> None:
        self._entries[id(value)] = (value, path)

    def copy(self) -> SeenMap:
        """Return an independent copy (values are shared, entries are not)."""
        return SeenMap(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class DataParser:
    """Builds Descriptor trees from arbitrary, possibly cyclic object graphs.

    A parser is owned by one build: ``reset()`` at the start of the build,
    ``set_global_keys()`` before the first pass, one global pass, then one
    page pass per rendered page.

    Args:
        config: Traversal budgets.  Defaults to ``ParserConfig()``.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config: ParserConfig = config if config is not None else ParserConfig()
        self.global_keys: list[str] | None = None
        self.seen_global = SeenMap()
        self.seen_page = SeenMap()
        self._has_global = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def has_global(self) -> bool:
        """Return True once global data has been parsed in this build."""
        return self._has_global

    def reset(self) -> None:
        """Forget all identity state and the global-key set."""
        self.seen_global.clear()
        self.seen_page.clear()
        self.global_keys = None
        self._has_global = False

    def set_global_keys(self, global_keys: Iterable[str]) -> None:
        """Set the top-level keys that belong to global data."""
        self.global_keys = list(global_keys)

    def _require_global_keys(self) -> list[str]:
        if self.global_keys is None:
            msg = "set_global_keys() must be called before parsing"
            raise ParserStateError(msg)
        return self.global_keys

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def parse_global_data(self, context: Any) -> Descriptor | None:
        """Parse the global partition of ``context``.

        Returns:
            The root Descriptor (key ``"root"``), or None when
            ``max_depth`` is 0.

        Raises:
            ParserStateError: If no global-key set has been pushed.
        """
        global_keys = self._require_global_keys()
        self.seen_global.clear()
        logger.debug("Parsing global data, global keys %s", global_keys)

        parsed: list[Descriptor] = []
        self.walk(ParseMode.GLOBAL, "root", context, parsed, self.seen_global)
        self._has_global = True

        logger.debug("Global pass registered %d objects", len(self.seen_global))
        return parsed.pop() if parsed else None

    async def parse_page_data(self, context: Any) -> Descriptor | None:
        """Parse the page partition of ``context``.

        Objects registered by the preceding global pass are reported as
        CIRCULAR.  The working SeenMap is cleared afterwards.

        Raises:
            ParserStateError: If no global-key set has been pushed.
        """
        global_keys = self._require_global_keys()
        self.seen_page = self.seen_global.copy()
        logger.debug("Parsing page data, global keys %s", global_keys)

        parsed: list[Descriptor] = []
        try:
            self.walk(ParseMode.PAGE, "root", context, parsed, self.seen_page)
            logger.debug("Page pass registered %d objects", len(self.seen_page))
        finally:
            self.seen_page.clear()
        return parsed.pop() if parsed else None

    def parse_value(self, value: Any, key: str = "root") -> Descriptor | None:
        """Parse a single value without partitioning or shared identity state."""
        parsed: list[Descriptor] = []
        self.walk(ParseMode.ALL, key, value, parsed, SeenMap())
        return parsed.pop() if parsed else None

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(
        self,
        mode: ParseMode,
        key: str | None,
        value: Any,
        append_to: list[Descriptor] | dict[str, Descriptor],
        seen: SeenMap,
        depth: int = 0,
        path: str | None = None,
    ) -> None:
        """Describe ``value`` and add the Descriptor to ``append_to``.

        Args:
            mode:      Partition applied to the keys at depth 1.
            key:       Key of ``value`` in its parent; None for set elements.
            value:     The value to describe.
            append_to: A list (children of a container) or, for the synthetic
                       root wrapper only, a dict receiving the descriptor
                       under ``key``.
            seen:      Identity map of the current pass (mutated in place).
            depth:     Nesting level of ``value``; the root is 0.
            path:      Dotted path of ``value``; defaults to ``key``.
        """
        if path is None:
            path = key or ""

        if depth == self.config.max_depth:
            return

        if depth == 1 and key and mode != ParseMode.ALL:
            is_global = key in self._require_global_keys()
            if mode == ParseMode.GLOBAL and not is_global:
                return
            if mode == ParseMode.PAGE and is_global:
                return

        tag = classify(value)

        if depth > 0 and _is_tracked(tag, value):
            first_path = seen.path_of(value)
            if first_path is not None:
                circular = Descriptor(DataType.CIRCULAR, key=key or None, content=first_path)
                _append(append_to, key, circular)
                return
            # Registered before recursing so direct self-references are caught.
            seen.register(value, path)

        summary = summarize(tag, value, self.config.cutoff)
        data = Descriptor(
            summary.type,
            key=key or None,
            content=summary.content,
            length=summary.length,
        )

        if isinstance(data.content, list):
            try:
                self._walk_children(mode, key, value, data, seen, depth, path)
            except XrayError:
                raise
            except Exception:  # noqa: BLE001 - iteration of hostile containers
                logger.debug("Could not walk children of %s", path, exc_info=True)
                data = Descriptor(DataType.UNKNOWN, key=key or None, content="?")

        _append(append_to, key, data)

    def _walk_children(
        self,
        mode: ParseMode,
        key: str | None,
        value: Any,
        data: Descriptor,
        seen: SeenMap,
        depth: int,
        path: str,
    ) -> None:
        children = data.children

        if data.type == DataType.ARRAY:
            for idx, item in enumerate(value):
                self.walk(mode, str(idx), item, children, seen, depth + 1, f"{path}.{idx}")

        elif data.type == DataType.MAP:
            for child_key in sorted(value.keys(), key=_key_order):
                name = str(child_key)
                self.walk(mode, name, value[child_key], children, seen, depth + 1, f"{path}.{name}")

        elif data.type == DataType.SET:
            for idx, item in enumerate(value):
                self.walk(mode, None, item, children, seen, depth + 1, f"{path}.{idx}")

        elif data.type == DataType.OBJECT:
            record = value if isinstance(value, dict) else vars(value)
            sorted_keys = sorted(record, key=_key_order)

            if key is not None and key == self.config.collections_key:
                for child_key in sorted_keys:
                    children.append(_collection_summary(str(child_key), record[child_key]))
            else:
                for child_key in sorted_keys:
                    name = str(child_key)
                    self.walk(
                        mode, name, record[child_key], children, seen, depth + 1, f"{path}.{name}"
                    )


def _key_order(key: Any) -> tuple[Any, str]:
    # Keys with the same text (1 and "1") stay distinct, ordered by type name.
    return natural_key(str(key)), type(key).__name__


def _is_tracked(tag: DataType, value: Any) -> bool:
    if tag not in _REFERENCE_TYPES:
        return False
    # Immutable values that CPython may intern or share.
    if isinstance(value, _UNTRACKED_TYPES):
        return False
    # The empty tuple and frozenset are interned singletons.
    if isinstance(value, (tuple, frozenset)) and not value:
        return False
    return True


def _collection_summary(name: str, members: Any) -> Descriptor:
    if classify(members) == DataType.ARRAY:
        summary = summarize(DataType.ARRAY, members)
        return Descriptor(summary.type, key=name, length=summary.length)
    return Descriptor(DataType.OBJECT, key=name)


def _append(
    append_to: list[Descriptor] | dict[str, Descriptor],
    key: str | None,
    data: Descriptor,
) -> None:
    if isinstance(append_to, list):
        append_to.append(data)
    else:
        append_to[key or ""] = data
