"""
/auth endpoints: device registration, device check, subscriber lookup
"""
from subscription_api.services.identity_masker import IdentityMasker


def test_requests_without_bearer_rejected(client):
    response = client.get("/auth/subscriber-id")

    assert response.status_code == 401
    body = response.json()
    assert body["apiStatus"] == "error"
    assert body["statusCode"] == "UNAUTHORIZED"


def test_update_device_registers(client, headers):
    response = client.post("/auth/update-device", json={"deviceId": "device-A"}, headers=headers())

    assert response.status_code == 200
    body = response.json()
    assert body["apiStatus"] == "success"
    assert body["message"] == "Device registered successfully"
    assert body["updatedAt"]


def test_update_device_requires_device_id(client, headers):
    response = client.post("/auth/update-device", json={}, headers=headers())

    assert response.status_code == 400
    assert response.json()["message"] == "Device ID is required"


def test_check_device_after_takeover(client, headers):
    client.post("/auth/update-device", json={"deviceId": "device-A"}, headers=headers())
    client.post("/auth/update-device", json={"deviceId": "device-B"}, headers=headers())

    current = client.get("/auth/check-device", headers=headers(device_id="device-B"))
    displaced = client.get("/auth/check-device", headers=headers(device_id="device-A"))

    assert current.status_code == 200
    assert current.json()["isCurrentDevice"] is True
    assert displaced.status_code == 401
    body = displaced.json()
    assert body["isCurrentDevice"] is False
    assert body["statusCode"] == "DEVICE_MISMATCH"
    assert body["updatedAt"] == current.json()["updatedAt"]


def test_check_device_requires_header(client, headers):
    response = client.get("/auth/check-device", headers=headers())

    assert response.status_code == 400


def test_subscriber_id_lookup(client, headers, db):
    IdentityMasker(db).save_identity("user-1", "94711234567", "MASK1")

    response = client.get("/auth/subscriber-id", headers=headers())

    assert response.status_code == 200
    assert response.json() == {"apiStatus": "success", "subscriberId": "94711234567"}


def test_subscriber_id_missing_is_401(client, headers):
    response = client.get("/auth/subscriber-id", headers=headers(user_id="nobody"))

    assert response.status_code == 401
    assert response.json()["statusCode"] == "SUBSCRIBER_ID_NOT_FOUND"


def test_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/healthz").json()["ok"] is True
