from bson.objectid import ObjectId


def test_create_user_returns_public_record(client, user_service):
    response = client.post("/api/users/", json={"username": "jeanpaul", "password": "mypassword"})

    assert response.status_code == 201
    data = response.get_json()
    assert data["username"] == "jeanpaul"
    assert ObjectId.is_valid(data["id"])
    assert data["createdAt"] is not None
    assert "password" not in data
    assert response.headers["Location"].endswith(f"/api/users/{data['id']}")


def test_create_user_stores_password_hash(client, user_service, credential_service):
    response = client.post("/api/users/", json={"username": "jeanpaul", "password": "mypassword"})

    stored = user_service.find_by_id(response.get_json()["id"])
    assert stored.password != "mypassword"
    assert credential_service.verify_password("mypassword", stored.password)


def test_create_user_ignores_unknown_fields(client, user_service):
    response = client.post(
        "/api/users/",
        json={"username": "jeanpaul", "password": "mypassword", "isAdmin": True},
    )

    assert response.status_code == 201
    doc = user_service.users_collection.find_one({"username": "jeanpaul"})
    assert "isAdmin" not in doc


def test_create_user_requires_password(client):
    response = client.post("/api/users/", json={"username": "jeanpaul"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Password is required"


def test_create_user_rejects_empty_password(client):
    response = client.post("/api/users/", json={"username": "jeanpaul", "password": ""})

    assert response.status_code == 400


def test_create_user_duplicate_username_conflicts(client, make_user, user_service):
    make_user("jeanpaul")

    response = client.post("/api/users/", json={"username": "jeanpaul", "password": "other"})

    assert response.status_code == 409
    assert response.get_json()["message"] == "Username already exists"
    assert user_service.count_by_username("jeanpaul") == 1


def test_get_user(client, make_user):
    user = make_user("meme")

    response = client.get(f"/api/users/{user.id}")

    assert response.status_code == 200
    data = response.get_json()
    assert data["id"] == user.id
    assert data["username"] == "meme"
    assert data["createdAt"] == user.created_at.isoformat()
    assert "password" not in data


def test_get_user_unknown_id(client, user_service):
    missing_id = str(ObjectId())

    response = client.get(f"/api/users/{missing_id}")

    assert response.status_code == 404
    assert response.mimetype == "text/plain"
    assert response.get_data(as_text=True) == f"No user found with ID {missing_id}"


def test_get_user_malformed_id(client, user_service):
    response = client.get("/api/users/not-an-id")

    assert response.status_code == 404
    assert response.mimetype == "text/plain"
    assert response.get_data(as_text=True) == "No user found with ID not-an-id"


def test_patch_username_keeps_password_hash(client, make_user, user_service):
    user = make_user("meme")

    response = client.patch(f"/api/users/{user.id}", json={"username": "new"})

    assert response.status_code == 200
    assert response.get_json()["username"] == "new"
    stored = user_service.find_by_id(user.id)
    assert stored.username == "new"
    assert stored.password == user.password


def test_patch_password_keeps_username_and_rehashes(client, make_user, user_service, credential_service):
    user = make_user("meme", "oldpassword")

    response = client.patch(f"/api/users/{user.id}", json={"password": "newpassword"})

    assert response.status_code == 200
    assert response.get_json()["username"] == "meme"
    stored = user_service.find_by_id(user.id)
    assert stored.username == "meme"
    assert stored.password != "newpassword"
    assert credential_service.verify_password("newpassword", stored.password)
    assert not credential_service.verify_password("oldpassword", stored.password)


def test_patch_keeps_id_and_creation_date(client, make_user, user_service):
    user = make_user("meme")

    data = client.patch(f"/api/users/{user.id}", json={"username": "new"}).get_json()

    assert data["id"] == user.id
    assert data["createdAt"] == user.created_at.isoformat()


def test_patch_requires_json(client, make_user, user_service):
    user = make_user("meme")

    response = client.patch(f"/api/users/{user.id}", data="username=new")

    assert response.status_code == 415
    assert user_service.find_by_id(user.id).username == "meme"


def test_patch_unknown_user(client, user_service):
    missing_id = str(ObjectId())

    response = client.patch(f"/api/users/{missing_id}", json={"username": "new"})

    assert response.status_code == 404
    assert missing_id in response.get_data(as_text=True)


def test_patch_rejects_non_string_username(client, make_user):
    user = make_user("meme")

    response = client.patch(f"/api/users/{user.id}", json={"username": 42})

    assert response.status_code == 400


def test_delete_requires_authentication(client, make_user, user_service):
    user = make_user("meme")

    response = client.delete(f"/api/users/{user.id}")

    assert response.status_code == 401
    assert response.get_data() == b""
    assert user_service.find_by_id(user.id) is not None


def test_delete_rejects_invalid_token(client, make_user, user_service):
    user = make_user("meme")

    response = client.delete(f"/api/users/{user.id}", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert user_service.find_by_id(user.id) is not None


def test_delete_user(client, make_user, auth_headers):
    user = make_user("meme")

    response = client.delete(f"/api/users/{user.id}", headers=auth_headers)

    assert response.status_code == 204
    assert response.get_data() == b""
    assert client.get(f"/api/users/{user.id}").status_code == 404


def test_delete_keeps_guesses(client, make_user, add_guesses, auth_headers, user_service):
    user = make_user("meme")
    add_guesses(user.id, [10, 20])

    client.delete(f"/api/users/{user.id}", headers=auth_headers)

    assert user_service.guesses_collection.count_documents({"user_id": ObjectId(user.id)}) == 2


def test_delete_unknown_user(client, user_service, auth_headers):
    response = client.delete(f"/api/users/{ObjectId()}", headers=auth_headers)

    assert response.status_code == 404


def test_create_user_rejects_overlong_password(client, user_service):
    response = client.post("/api/users/", json={"username": "jeanpaul", "password": "x" * 100})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Password must be at most 72 bytes long"
    assert user_service.count_users() == 0


def test_create_user_accepts_72_byte_password(client):
    response = client.post("/api/users/", json={"username": "jeanpaul", "password": "x" * 72})

    assert response.status_code == 201


def test_patch_rejects_overlong_password(client, make_user, user_service):
    user = make_user("meme")

    response = client.patch(f"/api/users/{user.id}", json={"password": "é" * 40})

    assert response.status_code == 400
    assert user_service.find_by_id(user.id).password == user.password


def test_patch_rejects_malformed_json(client, make_user, user_service):
    user = make_user("meme")

    response = client.patch(f"/api/users/{user.id}", data="{bad", content_type="application/json")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Request body must be valid JSON"
    assert user_service.find_by_id(user.id).username == "meme"
