"""SQLAlchemy ORM models for the shopdb storage layer.

These models use SQLAlchemy 2.0 style with Mapped[] type annotations. The
tables themselves are created by migrations, never by metadata.create_all().
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models in shopdb."""

    pass


class ProductModel(Base):
    """A product with a cost and a name.

    Both timestamps come from the database clock, the same one the
    migration's column defaults use. created_at is set once at insertion;
    updated_at starts equal to it and is refreshed on every update issued
    through the ORM or Core.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"ProductModel(id={self.id}, name={self.name!r}, cost={self.cost})"
