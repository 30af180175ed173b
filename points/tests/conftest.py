import pytest

from points.service import PointsService


EXAMPLE_TRANSACTIONS = [
    ("DANNON", 1000, "2020-11-02T14:00:00Z"),
    ("UNILEVER", 200, "2020-10-31T11:00:00Z"),
    ("DANNON", -200, "2020-10-31T15:00:00Z"),
    ("MILLER COORS", 10000, "2020-11-01T14:00:00Z"),
    ("DANNON", 300, "2020-10-31T10:00:00Z"),
]


@pytest.fixture
def service() -> PointsService:
    return PointsService()


@pytest.fixture
def seeded_service(service: PointsService) -> PointsService:
    for payer, points, timestamp in EXAMPLE_TRANSACTIONS:
        service.grant(payer, points, timestamp)
    return service
