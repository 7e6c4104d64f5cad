from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_attendance.core.exceptions import EndpointNotRegistered
from campus_attendance.models.endpoint import Device, Gateway
from campus_attendance.utils.logging import get_logger

logger = get_logger(__name__)


class EndpointResolver:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, gateway_code: str, device_code: str) -> tuple[str, str]:
        """Resolve both codes in one round-trip; returns (gateway_id, device_id)."""
        gateway_id = (
            select(Gateway.id).where(Gateway.code == gateway_code).scalar_subquery()
        )
        device_id = (
            select(Device.id).where(Device.device_code == device_code).scalar_subquery()
        )
        result = await self.db.execute(
            select(gateway_id.label("gateway_id"), device_id.label("device_id"))
        )
        row = result.one()
        if row.gateway_id is None or row.device_id is None:
            raise EndpointNotRegistered(
                f"gateway {gateway_code!r} / device {device_code!r} not registered"
            )
        return row.gateway_id, row.device_id


async def mark_device_seen(
    session_factory: async_sessionmaker[AsyncSession],
    device_id: str,
    seen_at: datetime,
) -> None:
    """Stamp the device's last_seen. Never raises: this is telemetry only."""
    try:
        async with session_factory() as session:
            await session.execute(
                update(Device).where(Device.id == device_id).values(last_seen=seen_at)
            )
            await session.commit()
    except Exception as exc:
        logger.warning("Could not update last_seen for device %s: %s", device_id, exc)
