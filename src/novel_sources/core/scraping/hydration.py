"""Decoder for flat-table hydration payloads ("devalue" style).

Server-rendered pages embed their state as a JSON array (the *table*).
Values are stored once and reused by integer index: inside arrays and
objects, any integer ``i`` with ``0 <= i < len(table)`` means "the resolved
value of ``table[i]``". Primitives stored directly at a referenced slot are
terminal and never dereferenced again.

Note that a genuine small number stored inside a container cannot be told
apart from a reference. That ambiguity belongs to the wire format and is
kept as-is.

Typical use:

    table = extract_table(html)
    book = get_value_by_key(table, "current-book") if table else None
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

DEFAULT_PAYLOAD_SELECTOR = "script#__NUXT_DATA__"


def extract_table(
    markup: str, selector: str = DEFAULT_PAYLOAD_SELECTOR
) -> Optional[List[Any]]:
    """Return the parsed table embedded in ``markup`` or None.

    None is returned when the element is missing, its text is not JSON,
    or the JSON is not an array.
    """
    if not markup:
        return None
    return table_from_soup(BeautifulSoup(markup, "html.parser"), selector)


def table_from_soup(
    soup: BeautifulSoup, selector: str = DEFAULT_PAYLOAD_SELECTOR
) -> Optional[List[Any]]:
    """Same as :func:`extract_table` for a document that is already parsed."""
    element = soup.select_one(selector)
    if element is None:
        logger.debug("No hydration payload matching %r", selector)
        return None

    raw = element.string or element.get_text()
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # json recurses once per nesting level
        logger.debug("Hydration payload is not decodable: %s", exc)
        return None

    if not isinstance(data, list):
        logger.debug("Hydration payload is %s, expected list", type(data).__name__)
        return None
    return data


def locate_key(table: List[Any], key: str) -> Optional[int]:
    """Index of the slot right after the first exact occurrence of ``key``."""
    for position, value in enumerate(table):
        if isinstance(value, str) and value == key:
            following = position + 1
            return following if following < len(table) else None
    return None


def _as_index(node: Any, size: int) -> Optional[int]:
    # bool is an int subclass but never a reference
    if isinstance(node, bool):
        return None
    if isinstance(node, int):
        index = node
    elif isinstance(node, float) and node.is_integer():
        index = int(node)
    else:
        return None
    return index if 0 <= index < size else None


class _Frame:
    """One container being filled on the work stack."""

    __slots__ = ("index", "items", "output")

    def __init__(self, index: Optional[int], source: Any, output: Any):
        self.index = index
        self.output = output
        if isinstance(source, list):
            self.items = iter(enumerate(source))
        else:
            self.items = iter(source.items())

    def assign(self, key: Any, value: Any) -> None:
        if isinstance(self.output, list):
            self.output.append(value)
        else:
            self.output[key] = value


class GraphResolver:
    """Expands backreferences of one table into a self-contained value tree.

    ``cache`` maps table index to its resolved value and ``visiting`` holds
    the indices currently being expanded. Both belong to this resolver, so
    separate resolvers never share in-flight state.

    Traversal uses an explicit stack: a deep graph does not hit the
    interpreter recursion limit.
    """

    def __init__(
        self,
        table: List[Any],
        cache: Optional[Dict[int, Any]] = None,
        visiting: Optional[Set[int]] = None,
    ) -> None:
        self.table = table
        self.cache: Dict[int, Any] = {} if cache is None else cache
        self.visiting: Set[int] = set() if visiting is None else visiting

    def resolve(self, node: Any) -> Any:
        result, frame = self._open(node)
        if frame is None:
            return result

        stack = [frame]
        while stack:
            top = stack[-1]
            try:
                key, child = next(top.items)
            except StopIteration:
                stack.pop()
                self._close(top)
                continue

            value, child_frame = self._open(child)
            # containers are attached empty and filled in place
            top.assign(key, value)
            if child_frame is not None:
                stack.append(child_frame)
        return result

    def _open(self, node: Any) -> Tuple[Any, Optional[_Frame]]:
        """Return ``(value, frame)``; frame is None when value is final."""
        index = _as_index(node, len(self.table))
        if index is not None:
            if index in self.cache:
                return self.cache[index], None
            if index in self.visiting:
                logger.debug("Cycle on slot %d, yielding None", index)
                return None, None

            target = self.table[index]
            if isinstance(target, list):
                self.visiting.add(index)
                output: Any = []
                return output, _Frame(index, target, output)
            if isinstance(target, dict):
                self.visiting.add(index)
                output = {}
                return output, _Frame(index, target, output)
            self.cache[index] = target
            return target, None

        if isinstance(node, list):
            output = []
            return output, _Frame(None, node, output)
        if isinstance(node, dict):
            output = {}
            return output, _Frame(None, node, output)
        return node, None

    def _close(self, frame: _Frame) -> None:
        if frame.index is None:
            return
        self.visiting.discard(frame.index)
        self.cache[frame.index] = frame.output


def resolve(
    table: List[Any],
    node: Any,
    cache: Optional[Dict[int, Any]] = None,
    visiting: Optional[Set[int]] = None,
) -> Any:
    """Resolve ``node`` against ``table``; see :class:`GraphResolver`."""
    return GraphResolver(table, cache, visiting).resolve(node)


def get_value_by_key(table: List[Any], key: str) -> Optional[Any]:
    """Resolved value stored right after ``key`` in the table, or None."""
    start = locate_key(table, key)
    if start is None:
        return None
    return resolve(table, table[start])


class HydrationState:
    """Table parsed from one page, queried by key."""

    def __init__(self, table: List[Any]):
        self.table = table

    @classmethod
    def from_markup(
        cls, markup: str, selector: str = DEFAULT_PAYLOAD_SELECTOR
    ) -> Optional["HydrationState"]:
        table = extract_table(markup, selector)
        if table is None:
            return None
        return cls(table)

    @classmethod
    def from_soup(
        cls, soup: BeautifulSoup, selector: str = DEFAULT_PAYLOAD_SELECTOR
    ) -> Optional["HydrationState"]:
        table = table_from_soup(soup, selector)
        if table is None:
            return None
        return cls(table)

    def get(self, key: str, default: Any = None) -> Any:
        value = get_value_by_key(self.table, key)
        return default if value is None else value

    def __len__(self) -> int:
        return len(self.table)
