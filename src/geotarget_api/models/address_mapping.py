"""AddressMapping model — offline index of ZIP/city/county rows with their state and geo target."""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from geotarget_api.lib.platform.base import to_geo_target
from geotarget_api.models.base import Base, TimestampMixin, UUIDMixin


class AddressMapping(Base, UUIDMixin, TimestampMixin):
    """One addressable location: a ZIP code within a city and county of a state.

    Rows are written by the bulk import only and are read-only at request time.
    ``criteria_id`` is the advertising platform's numeric location identifier,
    present when the row has been matched to a platform geo target.
    """

    __tablename__ = "address_geographic_mappings"

    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    county: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    country_code: Mapped[str] = mapped_column(String(2), nullable=False, default="US", server_default="US")
    criteria_id: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        UniqueConstraint("zip_code", "city", "county", "country_code", name="uq_agm_zip_city_county_country"),
        UniqueConstraint("criteria_id", name="uq_agm_criteria_id"),
        Index("ix_agm_zip_code", "zip_code"),
        Index("ix_agm_city_state", "city", "state"),
        Index("ix_agm_county_state", "county", "state"),
        Index("ix_agm_state", "state"),
    )

    @property
    def geo_target(self) -> str | None:
        """Platform identifier for this row, or None when it has no criteria ID."""
        if not self.criteria_id:
            return None
        return to_geo_target(self.criteria_id)

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state} {self.zip_code}"
