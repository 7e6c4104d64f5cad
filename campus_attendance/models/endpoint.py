from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from campus_attendance.core.enums import DeviceType, GatewayType

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Gateway(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A physical entry point: perimeter gate or classroom door."""

    __tablename__ = "gateways"

    code: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    gateway_type: Mapped[str] = mapped_column(
        String(20), server_default=GatewayType.gate.value
    )
    capacity: Mapped[Optional[int]] = mapped_column()

    def __repr__(self):
        return f"<Gateway(code='{self.code}')>"


class Device(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """The reader (phone, scanner, tablet) that performed a scan."""

    __tablename__ = "devices"

    device_code: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    device_name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner: Mapped[Optional[str]] = mapped_column(String(100))
    device_type: Mapped[str] = mapped_column(
        String(20), server_default=DeviceType.scanner.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_seen: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Device(device_code='{self.device_code}', last_seen={self.last_seen})>"
