import pytest
from sqlalchemy.exc import IntegrityError

from campus_attendance.models import Device, Gateway


@pytest.mark.parametrize(
    "column", [Gateway.__table__.c.code, Device.__table__.c.device_code]
)
def test_endpoint_codes_are_required(column):
    assert column.nullable is False
    assert column.unique is True


async def test_gateway_without_code_is_rejected(session_factory):
    async with session_factory() as session:
        session.add(Gateway(display_name="Side door", location="East wing"))
        with pytest.raises(IntegrityError):
            await session.commit()


async def test_device_without_code_is_rejected(session_factory):
    async with session_factory() as session:
        session.add(Device(device_name="Spare reader"))
        with pytest.raises(IntegrityError):
            await session.commit()
