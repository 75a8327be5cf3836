"""SQLAlchemy ORM models for the nearby flights service."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nearbyflights.db import Base


class RequestLog(Base):
    """One served nearby-flights request and the response sent back."""

    __tablename__ = "request_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True, nullable=False
    )
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    radius: Mapped[float | None] = mapped_column(Float, nullable=True)
    request_pretty_print: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    response_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    response_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_success: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    raw_flight_data: Mapped[str | None] = mapped_column(Text, nullable=True)
