"""SQLAlchemy models for users and their sweets."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import relationship

from .session import Base


user_sweets = Table(
    "user_sweets",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("chocolate_id", Integer, ForeignKey("chocolates.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)

    sweets = relationship(
        "Chocolate",
        secondary=user_sweets,
        back_populates="owners",
        order_by="Chocolate.id",
    )


class Chocolate(Base):
    __tablename__ = "chocolates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    taste = Column(String(255), nullable=False, default="")

    owners = relationship("User", secondary=user_sweets, back_populates="sweets")
