from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class GroupRecord(Base):
    __tablename__ = "group_records"

    id = Column(String(16), primary_key=True)
    url_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    budget = Column(Numeric(10, 2), nullable=True)
    organizer_telegram_id = Column(BigInteger, nullable=True, index=True)
    seed = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    pairings = relationship(
        "Pairing",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Pairing.position",
    )

    def __repr__(self) -> str:
        return f"<GroupRecord(id={self.id}, url_id={self.url_id}, expires_at={self.expires_at})>"


class Pairing(Base):
    __tablename__ = "pairings"

    id = Column(Integer, primary_key=True)
    group_id = Column(String(16), ForeignKey("group_records.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    giver_id = Column(String(16), nullable=False)
    giver_name = Column(String, nullable=False)
    receiver_id = Column(String(16), nullable=False)
    receiver_name = Column(String, nullable=False)
    secret_key = Column(String(16), nullable=False)

    group = relationship("GroupRecord", back_populates="pairings")

    __table_args__ = (
        UniqueConstraint("group_id", "giver_id", name="uq_pairings_group_giver"),
        UniqueConstraint("group_id", "receiver_id", name="uq_pairings_group_receiver"),
    )
