def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_request_id_in_response_header(client):
    """Test that X-Request-ID header is returned in responses."""
    resp = client.get("/api/vehicles")
    request_id = resp.headers["X-Request-ID"]
    assert len(request_id) == 36
    assert request_id.count("-") == 4


def test_request_id_can_be_provided_by_client(client):
    resp = client.get("/api/vehicles", headers={"X-Request-ID": "test-request-id-12345"})
    assert resp.headers["X-Request-ID"] == "test-request-id-12345"


# =============================================================================
# Vehicles
# =============================================================================

def test_list_vehicles(client):
    resp = client.get("/api/vehicles")
    assert resp.status_code == 200
    ids = {v["id"] for v in resp.json()}
    assert ids == {"truck-001", "truck-002", "excavator-001", "loader-001"}


def test_list_vehicles_by_status(client):
    resp = client.get("/api/vehicles", params={"status": "moving"})
    assert [v["id"] for v in resp.json()] == ["truck-002"]


def test_get_vehicle(client):
    resp = client.get("/api/vehicles/truck-002")
    assert resp.status_code == 200
    data = resp.json()
    assert data["position"] == {"lat": 40.7609, "lng": -111.8901}
    assert data["load_percentage"] == 75
    assert data["battery_status"] == "fair"
    assert data["metadata"]["manufacturer"] == "Komatsu"
    assert len(data["route"]) == 3


def test_get_unknown_vehicle(client):
    resp = client.get("/api/vehicles/truck-999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Vehicle not found"


def test_create_vehicle_with_location(client):
    resp = client.post("/api/vehicles", json={
        "name": "Mining Truck Gamma",
        "type": "haul_truck",
        "location": {"lat": 40.7579, "lng": -111.8873},
        "capacity": 120,
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"].startswith("vehicle-")
    assert data["position"] == {"lat": 40.7579, "lng": -111.8873}
    assert data["status"] == "idle"
    assert data["current_load"] == 0


def test_create_vehicle_requires_coordinate(client):
    resp = client.post("/api/vehicles", json={"name": "Ghost", "type": "loader"})
    assert resp.status_code == 422


def test_update_vehicle_load_over_capacity(client):
    """Test that a load above capacity is rejected and nothing changes."""
    resp = client.put("/api/vehicles/truck-001", json={"current_load": 150})
    assert resp.status_code == 400
    assert client.get("/api/vehicles/truck-001").json()["current_load"] == 0


def test_update_vehicle(client, publisher):
    resp = client.put("/api/vehicles/truck-001", json={
        "current_load": 80,
        "status": "working",
        "position": {"lat": 40.7590, "lng": -111.8880},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["load_percentage"] == 80
    assert data["status"] == "working"
    assert data["position"] == {"lat": 40.7590, "lng": -111.8880}
    assert publisher.names() == ["vehicle-updated"]


def test_move_vehicle(client):
    """Test that a move stores a three-point route ending at the destination."""
    resp = client.post("/api/vehicles/truck-001/move", json={
        "destination": {"lat": 40.7629, "lng": -111.8941},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "moving"
    assert data["destination"] == {"lat": 40.7629, "lng": -111.8941}

    start, waypoint, end = data["route"]
    assert start == {"lat": 40.7589, "lng": -111.8883}
    assert end == {"lat": 40.7629, "lng": -111.8941}
    assert abs(waypoint["lat"] - (40.7589 + 40.7629) / 2) <= 0.005 + 1e-9
    assert abs(waypoint["lng"] - (-111.8883 - 111.8941) / 2) <= 0.005 + 1e-9


def test_delete_vehicle(client):
    assert client.delete("/api/vehicles/loader-001").status_code == 204
    assert client.get("/api/vehicles/loader-001").status_code == 404


# =============================================================================
# Points of Interest
# =============================================================================

def test_list_pois_sorted_by_name(client):
    names = [p["name"] for p in client.get("/api/pois").json()]
    assert names == [
        "Loading Dock Alpha",
        "Primary Crusher",
        "Zone A - Material A Storage",
        "Zone B - Material B Storage",
        "Zone C - Mixed Storage",
    ]


def test_list_pois_by_type(client):
    resp = client.get("/api/pois", params={"type": "storage_zone"})
    assert {p["id"] for p in resp.json()} == {"zone-a", "zone-b", "zone-c"}


def test_get_poi_derived_fields(client):
    data = client.get("/api/pois/zone-a").json()
    assert data["utilization_percentage"] == 75
    assert data["available_space"] == 250
    assert data["materials"] == ["Material A"]


def test_update_poi_amount_over_capacity(client):
    resp = client.put("/api/pois/zone-a", json={"current_amount": 1500})
    assert resp.status_code == 400


def test_update_poi_capacity_below_amount(client):
    """Test that shrinking capacity below the stored amount is rejected."""
    resp = client.put("/api/pois/zone-a", json={"capacity": 500})
    assert resp.status_code == 400


def test_update_poi(client, publisher):
    resp = client.put("/api/pois/zone-b", json={"current_amount": 500, "status": "maintenance"})
    assert resp.status_code == 200
    assert resp.json()["current_amount"] == 500
    assert resp.json()["status"] == "maintenance"
    assert publisher.names() == ["poi-updated"]


def test_create_poi(client):
    resp = client.post("/api/pois", json={
        "name": "Zone D - Overflow",
        "type": "storage_zone",
        "position": {"lat": 40.7669, "lng": -111.8823},
        "materials": ["Material A"],
        "capacity": 600,
    })
    assert resp.status_code == 201
    assert resp.json()["id"].startswith("poi-")


def test_create_poi_over_capacity(client):
    resp = client.post("/api/pois", json={
        "name": "Tiny",
        "type": "storage_zone",
        "position": {"lat": 40.0, "lng": -111.0},
        "capacity": 10,
        "current_amount": 20,
    })
    assert resp.status_code == 400


def test_new_poi_is_used_by_planner(client):
    """Test that the planner sees catalog changes on the next decomposition."""
    client.post("/api/pois", json={
        "name": "Zone D - Overflow",
        "type": "storage_zone",
        "position": {"lat": 40.7669, "lng": -111.8823},
        "capacity": 600,
    })
    resp = client.post("/api/tasks/decompose", json={
        "instruction": "Clear 50 tons from zone-a into zone d - overflow",
        "vehicle_id": "truck-001",
    })
    assert resp.json()["steps"][2]["action"] == "Transport to Zone D - Overflow"


# =============================================================================
# Materials
# =============================================================================

def test_list_materials(client):
    data = client.get("/api/materials").json()
    assert [m["name"] for m in data] == ["Material A", "Material B"]
    assert data[0]["safety_level"] == "low"
    assert data[0]["economic_data"]["price_per_ton"] == 850


def test_create_duplicate_material_conflicts(client):
    resp = client.post("/api/materials", json={
        "name": "Material A",
        "type": "ore",
        "density": 2.5,
        "color": "#8B4513",
    })
    assert resp.status_code == 409


def test_create_material_rejects_bad_color(client):
    resp = client.post("/api/materials", json={
        "name": "Material C",
        "type": "ore",
        "density": 2.9,
        "color": "copper",
    })
    assert resp.status_code == 422


def test_create_material(client):
    resp = client.post("/api/materials", json={
        "name": "Material C",
        "type": "ore",
        "density": 2.9,
        "color": "#B87333",
        "properties": {"toxicity": "high", "flammability": "high"},
    })
    assert resp.status_code == 201
    assert resp.json()["safety_level"] == "critical"
