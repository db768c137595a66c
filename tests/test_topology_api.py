def _codes(issues):
    return [issue["code"] for issue in issues]


def test_plan_tube_system(client):
    resp = client.post("/api/v1/topology/plan", json={"subscriber_count": 24, "pon_type": "gpon"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["topology"]["topology_type"] == "tube_system"
    assert [stage["splitter_type"] for stage in body["topology"]["stages"]] == ["1x16", "1x4"]
    assert body["topology"]["total_loss_db"] == 20
    assert body["validation"]["is_valid"] is True
    assert _codes(body["validation"]["warnings"]) == ["LOSS_BUDGET_AT_MAXIMUM"]
    assert body["recommendations"][0] == "Use TUBE SYSTEM topology: 1x16 -> 4x1x4"
    assert [node["device_name"] for node in body["diagram"]["stages"]] == ["MS_1", "SUBMS_2"]
    assert body["rules"]["max_passive_loss_db"] == 20


def test_plan_accepts_inventory_field_names(client):
    resp = client.post("/api/v1/topology/plan", json={"subscriberCount": 8, "oltType": "GPON"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["topology"]["topology_type"] == "direct"
    assert body["topology"]["pon_type"] == "gpon"
    assert body["topology"]["stages"] == []


def test_plan_over_capacity_is_reported_not_rejected(client):
    resp = client.post("/api/v1/topology/plan", json={"subscriber_count": 65, "pon_type": "epon"})
    assert resp.status_code == 200
    validation = resp.json()["validation"]
    assert validation["is_valid"] is False
    assert _codes(validation["errors"]) == ["CAPACITY_EXCEEDED"]


def test_plan_rejects_non_positive_count(client):
    resp = client.post("/api/v1/topology/plan", json={"subscriber_count": 0, "pon_type": "gpon"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "invalid_input"
    assert body["details"] == {"field": "subscriber_count"}
    assert body["request_id"] == resp.headers["X-Request-ID"]


def test_plan_rejects_unknown_pon_type(client):
    resp = client.post("/api/v1/topology/plan", json={"subscriber_count": 10, "pon_type": "docsis"})
    assert resp.status_code == 400
    assert "Unknown PON type" in resp.json()["message"]


def test_plan_missing_field_is_validation_error(client):
    resp = client.post("/api/v1/topology/plan", json={"pon_type": "gpon"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "validation_error"
    assert isinstance(body["details"], list)


def test_rules_endpoint(client):
    resp = client.get("/api/v1/topology/rules")
    assert resp.status_code == 200
    body = resp.json()
    assert body["pon_capacity"]["epon"] == 64
    assert body["splitter_losses_db"]["1x16"] == 13
    assert body["tube_system"]["capacity"] == 64


def test_examples_endpoint(client):
    resp = client.get("/api/v1/topology/examples")
    assert resp.status_code == 200
    examples = resp.json()
    assert len(examples) == 5
    assert examples[0]["topology"]["topology_type"] == "direct"
    assert _codes(examples[-1]["validation"]["errors"]) == ["CAPACITY_EXCEEDED"]


def test_validate_existing_topology(client):
    resp = client.post(
        "/api/v1/topology/validate",
        json={
            "pon_type": "gpon",
            "stages": [
                {"device_type": "ms", "splitter_type": "1x16"},
                {"device_type": "subms", "splitter_type": "1x8"},
            ],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["topology"]["total_loss_db"] == 23
    assert _codes(body["validation"]["errors"]) == ["LOSS_BUDGET_EXCEEDED"]
    assert "NON_STANDARD_TOPOLOGY" in _codes(body["validation"]["warnings"])


def test_device_slots_endpoint(client):
    resp = client.post(
        "/api/v1/topology/ports/slots",
        json={"deviceId": "ms-7", "deviceType": "ms", "msType": "1x16", "activePorts": 20},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_ports"] == 16
    assert body["available_ports"] == 0
    assert body["device"]["type_code"] == "1x16"


def test_device_slots_rejects_unsupported_device(client):
    resp = client.post(
        "/api/v1/topology/ports/slots",
        json={"device_id": "fdb-1", "device_type": "fdb"},
    )
    assert resp.status_code == 400
    assert resp.json()["details"] == {"field": "device_type"}


def test_port_allocation_endpoint(client):
    resp = client.post(
        "/api/v1/topology/ports/allocation",
        json={
            "devices": [
                {"device_id": "olt-1", "device_type": "olt", "type_code": "gpon", "active_ports": 4},
                {"device_id": "ms-1", "device_type": "ms", "type_code": "1x16", "active_ports": 5},
                {"device_id": "ms-2", "device_type": "ms", "type_code": "1x16", "active_ports": 4},
                {"device_id": "ms-3", "device_type": "ms", "type_code": "1x16", "active_ports": 16},
            ]
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"] == {
        "total_capacity": 64,
        "total_active": 29,
        "total_available": 35,
        "utilization_percentage": 45,
    }
    assert [item["device"]["device_id"] for item in body["attachment"]["best_ms"]] == [
        "ms-2",
        "ms-1",
        "ms-3",
    ]
    assert [item["device"]["device_id"] for item in body["attachment"]["optimal_path"]] == [
        "olt-1",
        "ms-2",
    ]
    assert len(body["devices_with_available_slots"]) == 3


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["X-Request-ID"] == "req-123"


def test_metrics_include_topology_operations(client):
    client.post("/api/v1/topology/plan", json={"subscriber_count": 12, "pon_type": "gpon"})
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert 'topology_operations_total{operation="plan",outcome="valid"}' in resp.text
