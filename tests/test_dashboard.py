"""
Tests for the sensors, dashboard and health endpoints.
"""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"success": True, "status": "healthy"}


def test_latest_sensors(client, ministry_headers):
    response = client.get("/api/sensors/latest", headers=ministry_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["readings"]["moisture"]["unit"] == "%"
    assert "secret_column" not in data["readings"]


def test_latest_sensors_outage(client, ministry_headers, sensor_reader):
    sensor_reader.fail = True

    response = client.get("/api/sensors/latest", headers=ministry_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "Sensor store unavailable"


def test_dashboard(client, admin_headers):
    client.post("/api/plants", json={"farmLocation": "Kampot", "plantName": "Pepper"}, headers=admin_headers)
    client.post(
        "/api/plants",
        json={"farmLocation": "Kampot", "plantName": "Durian", "status": "died"},
        headers=admin_headers,
    )

    response = client.get("/api/dashboard", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["plants"] == {
        "total": 2,
        "byStatus": {"well_planted": 1, "not_planted": 0, "died": 1},
    }
    assert data["latestSensors"]["location"] == "Kampong Cham"
    assert data["status"]["level"] == "good"


def test_dashboard_during_sensor_outage(client, admin_headers, sensor_reader):
    sensor_reader.fail = True

    data = client.get("/api/dashboard", headers=admin_headers).json()["data"]

    assert data["latestSensors"] is None
    assert data["status"]["level"] == "unknown"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Endpoint not found"}
