def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["env"]
    assert "timestamp" in payload


def test_responses_carry_request_id(client):
    response = client.get("/health")
    assert len(response.headers["x-request-id"]) == 8
