from conftest import API, register_and_login

PARIS = {"lat": 48.8566, "lng": 2.3522}


def test_get_user_is_public(client):
    alice, _ = register_and_login(client, "alice")
    response = client.get(f"{API}/users/{alice['id']}")
    assert response.status_code == 200
    assert response.json()["username"] == "alice"
    assert "password_hash" not in response.json()


def test_get_missing_user(client):
    response = client.get(f"{API}/users/999")
    assert response.status_code == 404
    assert response.json() == {"detail": "User not found", "error": "not_found"}


def test_list_users_is_admin_only(client, admin_headers):
    _, headers = register_and_login(client, "alice")
    assert client.get(f"{API}/users").status_code == 401
    assert client.get(f"{API}/users", headers=headers).status_code == 403

    response = client.get(f"{API}/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"root", "alice"}


def test_update_own_profile(client):
    alice, headers = register_and_login(client, "alice")
    response = client.patch(
        f"{API}/users/{alice['id']}",
        json={"bio": "Frequent traveller", "languages": ["English", "French"], "location": PARIS},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Frequent traveller"
    assert body["languages"] == ["English", "French"]
    assert body["location"]["lat"] == PARIS["lat"]
    assert body["full_name"] == alice["full_name"]


def test_update_password(client):
    alice, headers = register_and_login(client, "alice")
    client.patch(f"{API}/users/{alice['id']}", json={"password": "newsecret"}, headers=headers)
    assert client.post(f"{API}/auth/login", json={"username": "alice", "password": "secret123"}).status_code == 401
    assert client.post(f"{API}/auth/login", json={"username": "alice", "password": "newsecret"}).status_code == 200


def test_cannot_update_someone_else(client):
    alice, _ = register_and_login(client, "alice")
    _, bob_headers = register_and_login(client, "bob")
    response = client.patch(f"{API}/users/{alice['id']}", json={"bio": "hacked"}, headers=bob_headers)
    assert response.status_code == 403
    assert client.get(f"{API}/users/{alice['id']}").json()["bio"] is None


def test_update_requires_authentication(client):
    alice, _ = register_and_login(client, "alice")
    assert client.patch(f"{API}/users/{alice['id']}", json={"bio": "x"}).status_code == 401


def test_role_and_verification_are_admin_only(client, admin_headers):
    alice, headers = register_and_login(client, "alice")
    assert client.patch(f"{API}/users/{alice['id']}", json={"role": "admin"}, headers=headers).status_code == 403
    assert client.patch(f"{API}/users/{alice['id']}", json={"is_verified": True}, headers=headers).status_code == 403

    response = client.patch(f"{API}/users/{alice['id']}", json={"is_verified": True}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_verified"] is True


def test_rating_cannot_be_set_directly(client):
    alice, headers = register_and_login(client, "alice")
    response = client.patch(f"{API}/users/{alice['id']}", json={"avg_rating": 5}, headers=headers)
    assert response.status_code == 400


def test_username_change_must_stay_unique(client):
    register_and_login(client, "alice")
    bob, headers = register_and_login(client, "bob")
    response = client.patch(f"{API}/users/{bob['id']}", json={"username": "Alice"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Username already taken"


def test_admin_update_of_missing_user(client, admin_headers):
    assert client.patch(f"{API}/users/999", json={"bio": "x"}, headers=admin_headers).status_code == 404


def test_nearby_assistants(client):
    near, _ = register_and_login(client, "near", "assistant", location={"lat": 48.8666, "lng": 2.3522})
    far, _ = register_and_login(client, "far", "assistant", location={"lat": 48.9066, "lng": 2.3522})
    register_and_login(client, "lyon", "assistant", location={"lat": 45.7640, "lng": 4.8357})
    register_and_login(client, "client", "client", location=PARIS)

    response = client.get(f"{API}/assistants/nearby", params=PARIS)
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [near["id"], far["id"]]

    response = client.get(f"{API}/assistants/nearby", params={**PARIS, "radius": 2})
    assert [u["id"] for u in response.json()] == [near["id"]]


def test_nearby_requires_coordinates(client):
    response = client.get(f"{API}/assistants/nearby", params={"lat": 48.8566})
    assert response.status_code == 400
    assert response.json()["detail"] == "Location coordinates required"


def test_nearby_rejects_out_of_range_coordinates(client):
    assert client.get(f"{API}/assistants/nearby", params={"lat": 91, "lng": 0}).status_code == 400
    assert client.get(f"{API}/assistants/nearby", params={"lat": 0, "lng": 0, "radius": 0}).status_code == 400
