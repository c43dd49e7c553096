"""
Time series identifiers.

A time series identifier (TSID) names a series with a compound string::

    [LOCTYPE:]LOCATION[-SUBLOC].SOURCE[-SUBSOURCE].TYPE[-SUBTYPE].INTERVAL[.SCENARIO][[SEQID]][~INPUTTYPE[~INPUTNAME]]

Separators:

- ``.`` separates the main fields
- ``-`` separates the main and sub parts of location, source and type
- ``:`` ends an optional location type prefix
- ``~`` introduces the input type and input name
- ``[`` and ``]`` enclose an ensemble sequence identifier
- ``'`` (or ``"`` for the location) quotes a field holding literal periods

:class:`TSIdent` keeps the parts and always rebuilds the full identifier from
them with :func:`identifier_from_parts`, so the string and the parts never
drift apart.
"""

from __future__ import annotations

import logging
import re

from pyhydrots.core.interval import IntervalBase, TimeInterval, parse_interval

logger = logging.getLogger(__name__)

# Behavior mask bits
NO_SUB_LOCATION = 0x1
NO_SUB_SOURCE = 0x2
NO_SUB_TYPE = 0x4
NO_VALIDATION = 0x8

SEPARATOR = "."
SUB_SEPARATOR = "-"
LOC_TYPE_SEPARATOR = ":"
INPUT_SEPARATOR = "~"
SEQUENCE_ID_LEFT = "["
SEQUENCE_ID_RIGHT = "]"

_INTERVAL_STRINGS = {
    IntervalBase.HSECOND: "hsec",
    IntervalBase.SECOND: "sec",
    IntervalBase.MINUTE: "min",
    IntervalBase.HOUR: "hour",
    IntervalBase.DAY: "day",
    IntervalBase.WEEK: "week",
    IntervalBase.MONTH: "month",
    IntervalBase.YEAR: "year",
    IntervalBase.IRREGULAR: "irreg",
}


def identifier_from_parts(
    location_type: str,
    location: str,
    source: str,
    data_type: str,
    interval: str,
    scenario: str = "",
    sequence_id: str = "",
    input_type: str = "",
    input_name: str = "",
) -> str:
    """
    Join identifier parts into the canonical TSID string.

    Location, source, type and interval are always written (even when
    empty) so the field positions are preserved.  Location type, scenario,
    sequence ID, input type and input name are only written when non-empty.
    An input name without an input type is written after an empty input
    type field (``~~name``) so it reads back as the name.
    """
    identifier = ""
    if location_type:
        identifier += location_type + LOC_TYPE_SEPARATOR
    identifier += SEPARATOR.join([location or "", source or "", data_type or "", interval or ""])
    if scenario:
        identifier += SEPARATOR + scenario
    if sequence_id:
        identifier += SEQUENCE_ID_LEFT + sequence_id + SEQUENCE_ID_RIGHT
    if input_type or input_name:
        identifier += INPUT_SEPARATOR + input_type
    if input_name:
        identifier += INPUT_SEPARATOR + input_name
    return identifier


def split_with_quotes(body: str) -> list[str]:
    """
    Split an identifier body on periods that are not inside quotes.

    A single quote opens a quoted span anywhere; a double quote opens one
    only in the first field.  Quote characters are kept in the tokens.  A
    trailing period produces a trailing empty token.  If a quote is never
    closed, the body is split on every period instead.

    Args:
        body: Identifier without the ``~`` input parts

    Returns:
        List of field tokens
    """
    parts: list[str] = []
    token = ""
    quote: str | None = None
    for ch in body:
        if quote is not None:
            token += ch
            if ch == quote:
                quote = None
        elif ch == "'" or (ch == '"' and not parts):
            token += ch
            quote = ch
        elif ch == SEPARATOR:
            parts.append(token)
            token = ""
        else:
            token += ch

    if quote is not None:
        logger.warning("Unmatched quote in time series identifier '%s'", body)
        return body.split(SEPARATOR)

    parts.append(token)
    return parts


def _find_unquoted(text: str, target: str) -> int:
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == target:
            return i
    return -1


def _split_main_sub(field: str, no_sub: bool) -> tuple[str, str]:
    if no_sub:
        return field, ""
    pos = _find_unquoted(field, SUB_SEPARATOR)
    if pos < 0:
        return field, ""
    return field[:pos], field[pos + 1:]


def _join_main_sub(main: str, sub: str) -> str:
    if sub:
        return f"{main}{SUB_SEPARATOR}{sub}"
    return main


def _extract_sequence_id(field: str, name: str) -> tuple[str, str]:
    """Split ``text[seq]`` into ``(text, seq)``."""
    index = field.find(SEQUENCE_ID_LEFT)
    if index < 0:
        return field, ""
    if not field.endswith(SEQUENCE_ID_RIGHT):
        logger.warning("Malformed sequence ID in %s '%s' - expecting closing ']'", name, field)
        return field, ""
    sequence_id = field[index + 1:-1].strip()
    return field[:index], sequence_id


class TSIdent:
    """
    Time series identifier.

    Args:
        identifier: Full identifier string to parse, or None for an empty
            identifier
        behavior_mask: Combination of NO_SUB_LOCATION, NO_SUB_SOURCE,
            NO_SUB_TYPE and NO_VALIDATION

    Example:
        >>> tsid = TSIdent("USGS:09010500-A.USGS.Streamflow.Day.Obs[2]~HydroBase")
        >>> tsid.location_type, tsid.sub_location, tsid.sequence_id
        ('USGS', 'A', '2')
        >>> tsid.interval_base == IntervalBase.DAY
        True
    """

    # Mutable
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, identifier: str | None = None, behavior_mask: int = 0) -> None:
        self._behavior_mask = behavior_mask
        self._location_type = ""
        self._main_location = ""
        self._sub_location = ""
        self._main_source = ""
        self._sub_source = ""
        self._main_type = ""
        self._sub_type = ""
        self._interval_string = ""
        self._interval_base = IntervalBase.UNKNOWN
        self._interval_mult = 0
        self._scenario = ""
        self._sequence_id = ""
        self._input_type = ""
        self._input_name = ""
        self._alias = ""
        self._comment = ""
        self._identifier = ""
        self._recompose()

        if identifier is not None:
            self._parse_into(identifier)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, identifier: str, behavior_mask: int = 0) -> TSIdent:
        """Parse a full identifier string."""
        return cls(identifier, behavior_mask)

    @classmethod
    def from_parts(
        cls,
        location: str,
        source: str,
        data_type: str,
        interval: str,
        scenario: str = "",
        sequence_id: str = "",
        input_type: str = "",
        input_name: str = "",
        location_type: str = "",
        behavior_mask: int = 0,
    ) -> TSIdent:
        """
        Build an identifier from its parts.

        Location, source and data type are full fields and are split into
        main and sub parts as they would be when parsed.
        """
        tsid = cls(behavior_mask=behavior_mask)
        tsid._location_type = location_type
        tsid._main_location, tsid._sub_location = _split_main_sub(
            location, bool(behavior_mask & NO_SUB_LOCATION)
        )
        tsid._main_source, tsid._sub_source = _split_main_sub(
            source, bool(behavior_mask & NO_SUB_SOURCE)
        )
        tsid._main_type, tsid._sub_type = _split_main_sub(
            data_type, bool(behavior_mask & NO_SUB_TYPE)
        )
        tsid._scenario = scenario
        tsid._sequence_id = sequence_id
        tsid._input_type = input_type
        tsid._input_name = input_name
        tsid.interval = interval
        return tsid

    def copy(self) -> TSIdent:
        """Return an independent copy."""
        other = TSIdent.__new__(TSIdent)
        other.__dict__.update(self.__dict__)
        return other

    def __copy__(self) -> TSIdent:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> TSIdent:
        return self.copy()

    def _parse_into(self, identifier: str) -> None:
        mask = self._behavior_mask

        # Input type and input name; the name may itself hold "~"
        body, _, inputs = identifier.partition(INPUT_SEPARATOR)
        input_type, _, input_name = inputs.partition(INPUT_SEPARATOR)

        # Location type only counts if its colon precedes the first field separator
        location_type = ""
        if body and body[0] not in ("'", '"'):
            colon = _find_unquoted(body, LOC_TYPE_SEPARATOR)
            dot = _find_unquoted(body, SEPARATOR)
            if colon >= 0 and (dot < 0 or colon < dot):
                location_type = body[:colon]
                body = body[colon + 1:]

        tokens = split_with_quotes(body) if body else []
        location = tokens[0] if len(tokens) > 0 else ""
        source = tokens[1] if len(tokens) > 1 else ""
        data_type = tokens[2] if len(tokens) > 2 else ""
        interval = tokens[3] if len(tokens) > 3 else ""
        scenario = SEPARATOR.join(tokens[4:])

        sequence_id = ""
        if SEQUENCE_ID_LEFT in interval:
            interval, sequence_id = _extract_sequence_id(interval, "interval")
        if SEQUENCE_ID_LEFT in scenario:
            scenario, scenario_sequence_id = _extract_sequence_id(scenario, "scenario")
            if scenario_sequence_id:
                sequence_id = scenario_sequence_id

        self._location_type = location_type
        self._main_location, self._sub_location = _split_main_sub(
            location, bool(mask & NO_SUB_LOCATION)
        )
        self._main_source, self._sub_source = _split_main_sub(
            source, bool(mask & NO_SUB_SOURCE)
        )
        self._main_type, self._sub_type = _split_main_sub(
            data_type, bool(mask & NO_SUB_TYPE)
        )
        self._scenario = scenario
        self._sequence_id = sequence_id
        self._input_type = input_type
        self._input_name = input_name
        self.interval = interval

    def _recompose(self) -> None:
        self._identifier = identifier_from_parts(
            self._location_type,
            self.location,
            self.source,
            self.data_type,
            self._interval_string,
            self._scenario,
            self._sequence_id,
            self._input_type,
            self._input_name,
        )

    # ------------------------------------------------------------------
    # Composite strings
    # ------------------------------------------------------------------

    @property
    def identifier(self) -> str:
        """Full identifier string, rebuilt from the parts."""
        return self._identifier

    @identifier.setter
    def identifier(self, value: str) -> None:
        self._parse_into(value)

    @property
    def identifier_no_input(self) -> str:
        """Identifier without the input type and input name."""
        return identifier_from_parts(
            self._location_type,
            self.location,
            self.source,
            self.data_type,
            self._interval_string,
            self._scenario,
            self._sequence_id,
        )

    @property
    def behavior_mask(self) -> int:
        return self._behavior_mask

    @behavior_mask.setter
    def behavior_mask(self, value: int) -> None:
        self._behavior_mask = value

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    @property
    def location_type(self) -> str:
        return self._location_type

    @location_type.setter
    def location_type(self, value: str) -> None:
        self._location_type = value or ""
        self._recompose()

    @property
    def location(self) -> str:
        """Full location (main and sub parts)."""
        return _join_main_sub(self._main_location, self._sub_location)

    @location.setter
    def location(self, value: str) -> None:
        self._main_location, self._sub_location = _split_main_sub(
            value or "", bool(self._behavior_mask & NO_SUB_LOCATION)
        )
        self._recompose()

    @property
    def main_location(self) -> str:
        return self._main_location

    @main_location.setter
    def main_location(self, value: str) -> None:
        self._main_location = value or ""
        self._recompose()

    @property
    def sub_location(self) -> str:
        return self._sub_location

    @sub_location.setter
    def sub_location(self, value: str) -> None:
        self._sub_location = value or ""
        self._recompose()

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        """Full source (main and sub parts)."""
        return _join_main_sub(self._main_source, self._sub_source)

    @source.setter
    def source(self, value: str) -> None:
        self._main_source, self._sub_source = _split_main_sub(
            value or "", bool(self._behavior_mask & NO_SUB_SOURCE)
        )
        self._recompose()

    @property
    def main_source(self) -> str:
        return self._main_source

    @main_source.setter
    def main_source(self, value: str) -> None:
        self._main_source = value or ""
        self._recompose()

    @property
    def sub_source(self) -> str:
        return self._sub_source

    @sub_source.setter
    def sub_source(self, value: str) -> None:
        self._sub_source = value or ""
        self._recompose()

    # ------------------------------------------------------------------
    # Data type
    # ------------------------------------------------------------------

    @property
    def data_type(self) -> str:
        """Full data type (main and sub parts)."""
        return _join_main_sub(self._main_type, self._sub_type)

    @data_type.setter
    def data_type(self, value: str) -> None:
        self._main_type, self._sub_type = _split_main_sub(
            value or "", bool(self._behavior_mask & NO_SUB_TYPE)
        )
        self._recompose()

    @property
    def main_type(self) -> str:
        return self._main_type

    @main_type.setter
    def main_type(self, value: str) -> None:
        self._main_type = value or ""
        self._recompose()

    @property
    def sub_type(self) -> str:
        return self._sub_type

    @sub_type.setter
    def sub_type(self, value: str) -> None:
        self._sub_type = value or ""
        self._recompose()

    # ------------------------------------------------------------------
    # Interval
    # ------------------------------------------------------------------

    @property
    def interval(self) -> str:
        """Interval string exactly as given (e.g., ``"1Day"``)."""
        return self._interval_string

    @interval.setter
    def interval(self, value: str) -> None:
        value = value or ""
        self._interval_base = IntervalBase.UNKNOWN
        self._interval_mult = 0
        if value and value != "*":
            quiet = bool(self._behavior_mask & NO_VALIDATION)
            parsed = parse_interval(value, quiet=quiet)
            if parsed is not None:
                self._interval_base = parsed.base
                self._interval_mult = parsed.multiplier
        self._interval_string = value
        self._recompose()

    @property
    def interval_base(self) -> IntervalBase:
        return self._interval_base

    @property
    def interval_mult(self) -> int:
        return self._interval_mult

    @property
    def time_interval(self) -> TimeInterval | None:
        """Parsed interval, or None if the interval string is not valid."""
        if self._interval_base == IntervalBase.UNKNOWN:
            return None
        return parse_interval(self._interval_string, quiet=True)

    def set_interval_from_base(self, base: int, multiplier: int = 1) -> None:
        """
        Set the interval from a base and multiplier.

        The interval string is written in lower case with the multiplier
        only when it is not 1 (``"day"``, ``"6hour"``, ``"irreg"``).
        """
        if multiplier <= 0:
            logger.warning("Interval multiplier (%d) must be greater than zero", multiplier)
        if base not in _INTERVAL_STRINGS:
            logger.warning("Base interval (%s) is not recognized", base)
            return
        text = ""
        if base != IntervalBase.IRREGULAR and multiplier != 1:
            text = str(multiplier)
        self.interval = text + _INTERVAL_STRINGS[IntervalBase(base)]

    # ------------------------------------------------------------------
    # Scenario, sequence and input
    # ------------------------------------------------------------------

    @property
    def scenario(self) -> str:
        return self._scenario

    @scenario.setter
    def scenario(self, value: str) -> None:
        self._scenario = value or ""
        self._recompose()

    @property
    def sequence_id(self) -> str:
        """Ensemble trace identifier, or empty."""
        return self._sequence_id

    @sequence_id.setter
    def sequence_id(self, value: str | None) -> None:
        self._sequence_id = value or ""
        self._recompose()

    @property
    def input_type(self) -> str:
        return self._input_type

    @input_type.setter
    def input_type(self, value: str) -> None:
        self._input_type = value or ""
        self._recompose()

    @property
    def input_name(self) -> str:
        return self._input_name

    @input_name.setter
    def input_name(self, value: str) -> None:
        self._input_name = value or ""
        self._recompose()

    @property
    def alias(self) -> str:
        return self._alias

    @alias.setter
    def alias(self, value: str) -> None:
        self._alias = value or ""

    @property
    def comment(self) -> str:
        return self._comment

    @comment.setter
    def comment(self, value: str) -> None:
        self._comment = value or ""

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def matches(self, pattern: str, include_input: bool = False) -> bool:
        """
        Match against an identifier pattern, ignoring case.

        ``*`` in the pattern matches any run of characters.

        Args:
            pattern: Identifier pattern, e.g. ``"0901*.USGS.*.Day"``
            include_input: If True, compare the full identifier including
                input type and name
        """
        target = self._identifier if include_input else self.identifier_no_input
        regex = "".join(".*" if ch == "*" else re.escape(ch) for ch in pattern)
        return re.fullmatch(regex, target, flags=re.IGNORECASE) is not None

    def _key(self) -> tuple:
        return (
            self._location_type,
            self._main_location,
            self._sub_location,
            self._main_source,
            self._sub_source,
            self._main_type,
            self._sub_type,
            self._interval_string,
            self._scenario,
            self._sequence_id,
            self._input_type,
            self._input_name,
            self._alias,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TSIdent):
            return NotImplemented
        return self._key() == other._key()

    def __str__(self) -> str:
        return self._identifier

    def __repr__(self) -> str:
        return f"TSIdent('{self._identifier}')"
