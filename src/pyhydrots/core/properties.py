"""
Named property storage.

:class:`PropList` is an ordered list of :class:`Prop` key/value pairs with
case-insensitive lookup.  Each stored value records how it was set, so
values read from a file can be told apart from runtime defaults and user
choices.  Lists can be read from simple ``key = value`` files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from pyhydrots.core.exceptions import PropertyFileError

logger = logging.getLogger(__name__)


class HowSet(Enum):
    """How a property value was set."""

    UNKNOWN = "unknown"
    FROM_PERSISTENT = "from_persistent"
    RUNTIME_DEFAULT = "runtime_default"
    RUNTIME_BY_USER = "runtime_by_user"
    RUNTIME_FOR_USER = "runtime_for_user"
    HIDDEN = "hidden"


@dataclass
class Prop:
    """
    A single named property.

    Attributes:
        key: Property name
        contents: Stored object
        how_set: How the value was set
    """

    key: str
    contents: Any = None
    how_set: HowSet = HowSet.UNKNOWN

    @property
    def value(self) -> str | None:
        """String form of the contents, or None if unset."""
        if self.contents is None:
            return None
        return str(self.contents)


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


class PropList:
    """
    Ordered, case-insensitive property list.

    Args:
        name: Name of the list, used in messages
        how_set: Tag applied to values set without an explicit tag
    """

    def __init__(self, name: str = "", how_set: HowSet = HowSet.RUNTIME_BY_USER) -> None:
        self.name = name
        self.how_set = how_set
        self.persistent_name = ""
        self._props: list[Prop] = []

    @classmethod
    def from_file(cls, path: Path | str, name: str = "") -> PropList:
        """Create a list and fill it from a persistent file."""
        props = cls(name or Path(path).name)
        props.read_persistent(path)
        return props

    def find(self, key: str) -> int:
        """Return the index of ``key`` (ignoring case), or -1."""
        target = key.upper()
        for i, prop in enumerate(self._props):
            if prop.key.upper() == target:
                return i
        return -1

    def get_prop(self, key: str) -> Prop | None:
        index = self.find(key)
        return self._props[index] if index >= 0 else None

    def get_value(self, key: str) -> str | None:
        """Return the string value of ``key``, or None if not set."""
        prop = self.get_prop(key)
        return prop.value if prop is not None else None

    def get_contents(self, key: str) -> Any:
        prop = self.get_prop(key)
        return prop.contents if prop is not None else None

    def set(self, key: str, contents: Any = None, how_set: HowSet | None = None) -> None:
        """
        Set a property, replacing an existing one with the same key.

        A single ``"key=value"`` string may be given in place of separate
        key and contents.
        """
        if contents is None and "=" in key:
            key, _, contents = key.partition("=")
            key = key.strip()
            contents = contents.strip()
        tag = how_set if how_set is not None else self.how_set
        index = self.find(key)
        if index >= 0:
            prop = self._props[index]
            prop.contents = contents
            prop.how_set = tag
        else:
            self._props.append(Prop(key=key, contents=contents, how_set=tag))

    def unset(self, key: str) -> None:
        """Remove ``key`` if present."""
        index = self.find(key)
        if index >= 0:
            del self._props[index]

    def clear(self) -> None:
        self._props.clear()

    def read_persistent(self, path: Path | str, append: bool = True) -> None:
        """
        Read properties from a ``key = value`` file.

        Supported syntax:

        - ``#`` starts a comment line and ``/* ... */`` spans comment lines
        - ``[Section]`` prefixes following keys with ``Section.``
        - a trailing ``\\`` continues a line
        - matching quotes around a value are removed

        Lines without ``=`` are logged and skipped.  Values read are tagged
        :attr:`HowSet.FROM_PERSISTENT`.

        Args:
            path: File to read
            append: If False, existing properties are removed first

        Raises:
            PropertyFileError: If the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text()
        except OSError as exc:
            raise PropertyFileError(f"Unable to read property file '{path}': {exc}") from exc

        if not append:
            self.clear()
        self.persistent_name = str(path)

        section = ""
        in_comment = False
        pending = ""
        pending_start = 0
        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if line.endswith("\\"):
                if not pending:
                    pending_start = line_number
                pending += line[:-1]
                continue
            if pending:
                line = pending + line
                line_number = pending_start
                pending = ""

            if in_comment:
                if "*/" in line:
                    in_comment = False
                continue
            if line.startswith("/*"):
                in_comment = "*/" not in line
                continue
            if not line or line.startswith("#"):
                continue
            if line.startswith("[") and line.endswith("]"):
                section = line[1:-1].strip()
                continue
            if "=" not in line:
                logger.warning(
                    "Line %d of property file '%s' has no '=' - skipping: %s",
                    line_number,
                    path,
                    line,
                )
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            if section:
                key = f"{section}.{key}"
            self.set(key, _strip_quotes(value.strip()), HowSet.FROM_PERSISTENT)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) >= 0

    def __iter__(self) -> Iterator[Prop]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __repr__(self) -> str:
        return f"PropList(name='{self.name}', n_props={len(self)})"
