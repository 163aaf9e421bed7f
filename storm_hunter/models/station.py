from datetime import date
from typing import Optional

from sqlalchemy import Date, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storm_hunter.models.base import Base


class Station(Base):
    """
    ISD weather station entity.

    One row of the NOAA Integrated Surface Database station history.
    Each station is uniquely identified by `identifier`, the pair
    `USAF-WBAN` (e.g. `722430-12960` for Houston Intercontinental).

    Instances are also used transiently, without a session, when the
    catalog is read straight from the history CSV.
    """

    __tablename__ = "stations"

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Internal unique identifier for the station",
    )

    identifier: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        unique=True,
        comment="Composite station identifier 'USAF-WBAN'",
    )

    usaf: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment="Air Force station ID, may start with a letter",
    )

    wban: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment="NCDC WBAN number",
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(256),
        nullable=True,
        comment="Human-readable station name",
    )

    country: Mapped[Optional[str]] = mapped_column(
        String(8),
        nullable=True,
        comment="FIPS country ID",
    )

    state: Mapped[Optional[str]] = mapped_column(
        String(8),
        nullable=True,
        comment="State for US stations",
    )

    icao: Mapped[Optional[str]] = mapped_column(
        String(8),
        nullable=True,
        comment="ICAO ID",
    )

    latitude: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Latitude in decimal degrees",
    )

    longitude: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Longitude in decimal degrees",
    )

    elevation: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Elevation in meters",
    )

    begin: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Beginning of the period of record",
    )

    end: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="End of the period of record",
    )

    @property
    def has_location(self) -> bool:
        """True when latitude, longitude and elevation are all known."""
        return (
            self.latitude is not None
            and self.longitude is not None
            and self.elevation is not None
        )

    def __repr__(self):
        return f"<Station(identifier='{self.identifier}', name='{self.name}')>"
