"""Country lookup table referenced by addresses."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from address_records.models.base import Base


class Country(Base):
    """A country an address can point at through ``country_id``."""

    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    iso_3166_2: Mapped[Optional[str]] = mapped_column(String(2), index=True)
    iso_3166_3: Mapped[Optional[str]] = mapped_column(String(3))

    def __repr__(self) -> str:
        return f"<Country(id={self.id!r}, name={self.name!r})>"
