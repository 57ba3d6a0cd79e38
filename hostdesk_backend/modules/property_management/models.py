"""Property management models for HostDesk.

- Properties own their messaging groups and a fixed block of door codes
- Child rows cascade away with their property
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.utils import utc_now
from ...database import Base, IdMixin, PreciseDateTime, TimestampMixin

# Every property carries exactly this many door code slots, numbered from 0
DOOR_CODE_SLOTS = 11

class Property(IdMixin, TimestampMixin, Base):
    """A managed rental unit."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    groups: Mapped[list["WhatsAppGroup"]] = relationship(
        "WhatsAppGroup",
        back_populates="property",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    door_codes: Mapped[list["DoorCode"]] = relationship(
        "DoorCode",
        back_populates="property",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_properties_name", "name"),)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"

class WhatsAppGroup(IdMixin, TimestampMixin, Base):
    """Messaging group attached to a property.

    ``evolution_id`` references the group in the messaging directory when the
    group was picked from it.
    """

    __tablename__ = "whatsapp_groups"

    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    template: Mapped[str] = mapped_column(Text, nullable=False, default="")
    links: Mapped[list[str] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    evolution_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    property: Mapped["Property"] = relationship("Property", back_populates="groups")

    __table_args__ = (Index("ix_whatsapp_groups_property", "property_id"),)

    def __repr__(self) -> str:
        return f"<WhatsAppGroup(id={self.id}, name={self.name})>"

class DoorCode(IdMixin, Base):
    """One numbered access-code slot of a property."""

    __tablename__ = "door_codes"

    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    code_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        PreciseDateTime, nullable=False, default=utc_now
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        PreciseDateTime, nullable=True
    )

    property: Mapped["Property"] = relationship(
        "Property", back_populates="door_codes"
    )

    __table_args__ = (
        UniqueConstraint(
            "property_id", "code_number", name="uq_door_codes_property_slot"
        ),
        CheckConstraint(
            f"code_number >= 0 AND code_number < {DOOR_CODE_SLOTS}",
            name="ck_door_codes_slot_range",
        ),
        Index("ix_door_codes_property", "property_id"),
    )

    def __repr__(self) -> str:
        return f"<DoorCode(id={self.id}, code_number={self.code_number})>"
