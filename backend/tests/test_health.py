"""Basic health check tests."""


def test_health_check(client):
    """Test that the health endpoint returns ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_routes_registered(client):
    """The analytics routers are mounted."""
    paths = {route.path for route in client.app.routes}
    for path in (
        "/api/snapshots",
        "/api/snapshots/{snapshot_id}/valuation",
        "/api/dashboard",
        "/api/dashboard/performance",
        "/api/dashboard/periods",
        "/api/rebalancing",
        "/api/exchange-rates/current",
        "/api/preferences",
    ):
        assert path in paths
