import pytest
from fastapi.testclient import TestClient

from app.models.topology import DeviceSnapshot, DeviceType
from app.services.topology.rules import TopologyRules


@pytest.fixture()
def rules():
    return TopologyRules()


@pytest.fixture()
def client():
    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def make_device():
    def _make(device_id, device_type, active_ports=0, type_code=None, **kwargs):
        return DeviceSnapshot(
            device_id=device_id,
            device_type=DeviceType(device_type),
            active_ports=active_ports,
            type_code=type_code,
            **kwargs,
        )

    return _make
