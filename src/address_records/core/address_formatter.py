"""Address formatting utilities.

One place that knows how an address is laid out as lines, as an HTML
``<address>`` block, as a single line and as a geocoder query, so the
record and the geocoder never disagree on component order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from address_records.models.address import AddressRecord

HTML_LINE_BREAK = "<br />"
LINE_SEPARATOR = ", "


def _present(parts: Iterable[object | None]) -> list[str]:
    """Keep the parts that render to a non-empty string."""
    return [str(part) for part in parts if part is not None and str(part) != ""]


class AddressFormatter:
    """Stateless helpers for rendering address components.

    Example:
        >>> formatter = get_formatter()
        >>> formatter.to_line(["221B Baker St", "NW16XE London", "UK"])
        '221B Baker St, NW16XE London, UK'
    """

    @staticmethod
    def compute_locality_line(
        post_code: str | None,
        city: str | None,
        state: str | None,
    ) -> str:
        """Build the "post code, city (state)" line.

        Returns:
            The non-empty parts joined by single spaces, or "" if none.
        """
        return " ".join(_present([post_code, city, f"({state})" if state else None]))

    @staticmethod
    def build_lines(
        line_1: str | None,
        line_2: str | None,
        line_3: str | None,
        post_code: str | None,
        city: str | None,
        state: str | None,
        country: str | None,
    ) -> list[str] | None:
        """Build the ordered address lines.

        Returns:
            [line_1, line_2, line_3, locality, country] without empty
            entries, or None when nothing is left.
        """
        locality = AddressFormatter.compute_locality_line(post_code, city, state)
        lines = _present([line_1, line_2, line_3, locality, country])
        return lines or None

    @staticmethod
    def to_html(lines: Sequence[str] | None) -> str | None:
        """Render lines as an ``<address>`` block separated by ``<br />``."""
        if not lines:
            return None
        return "<address>" + HTML_LINE_BREAK.join(_present(lines)) + "</address>"

    @staticmethod
    def to_line(lines: Sequence[str] | None) -> str | None:
        """Render lines as one comma-separated line."""
        if not lines:
            return None
        return LINE_SEPARATOR.join(_present(lines))

    @staticmethod
    def build_geocode_query(components: Iterable[str | None]) -> str:
        """Build the geocoder query string.

        Empty components are dropped, the rest joined with commas, trimmed,
        and spaces replaced by ``+``. No other characters are escaped.
        """
        query = ",".join(_present(components)).strip()
        return query.replace(" ", "+")

    @staticmethod
    def record_lines(record: AddressRecord) -> list[str] | None:
        """Address lines for a record, using its resolved country name."""
        return AddressFormatter.build_lines(
            line_1=record.line_1,
            line_2=record.line_2,
            line_3=record.line_3,
            post_code=record.post_code,
            city=record.city,
            state=record.state,
            country=record.get_country(),
        )

    @staticmethod
    def record_geocode_query(record: AddressRecord) -> str:
        """Geocoder query for a record, in line/city/state/post code/country order."""
        return AddressFormatter.build_geocode_query(
            [
                record.line_1,
                record.line_2,
                record.line_3,
                record.city,
                record.state,
                record.post_code,
                record.get_country(),
            ]
        )


# Module-level singleton for convenience
_formatter: AddressFormatter | None = None


def get_formatter() -> AddressFormatter:
    """Get the shared AddressFormatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = AddressFormatter()
    return _formatter


def build_geocode_query(components: Iterable[str | None]) -> str:
    """Module-level shortcut for AddressFormatter.build_geocode_query."""
    return AddressFormatter.build_geocode_query(components)
