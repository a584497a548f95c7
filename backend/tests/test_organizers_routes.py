import psycopg2.errors

ORGANIZER = {
    "organizer_id": 1,
    "organizer_name": "John Doe",
    "fname": "John",
    "lname": "Doe",
    "email": "john@example.com",
    "contact_no": "123456789",
}


def test_list_organizers_only_approved(client, mock_db):
    _, mock_cursor = mock_db()
    mock_cursor.fetchall.return_value = [ORGANIZER]

    response = client.get("/organizers/")

    assert response.status_code == 200
    assert response.get_json() == [ORGANIZER]
    sql = mock_cursor.execute.call_args[0][0]
    assert "status = 'approved'" in sql
    assert "password_hash" not in sql


def test_list_organizers_empty(client, mock_db):
    _, mock_cursor = mock_db()
    mock_cursor.fetchall.return_value = []

    response = client.get("/organizers/")

    assert response.get_json() == []


def test_get_organizer(client, mock_db):
    _, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = ORGANIZER

    response = client.get("/organizers/1")

    assert response.status_code == 200
    assert response.get_json() == ORGANIZER


def test_get_organizer_not_found(client, mock_db):
    _, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = None

    response = client.get("/organizers/999")

    assert response.status_code == 404
    assert response.get_json() == {"message": "Approved organizer not found"}


def test_update_organizer_with_password(client, app, mock_db, mocker, auth_header):
    _, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = {**ORGANIZER, "status": "approved"}
    mock_hash = mocker.patch.object(app.extensions["password_hasher"], "hash", return_value="hashedPass")

    payload = {
        "organizer_name": "John Doe",
        "fname": "John",
        "lname": "Doe",
        "email": "John@Example.com",
        "contact_no": "123456789",
        "password": "pass123",
    }
    response = client.put("/organizers/1", json=payload, headers=auth_header)

    assert response.status_code == 200
    assert response.get_json()["message"] == "Organizer updated"
    mock_hash.assert_called_once_with("pass123")
    args, _ = mock_cursor.execute.call_args
    assert args[1] == ("John Doe", "John", "Doe", "john@example.com", "123456789", "hashedPass", 1)


def test_update_organizer_without_password(client, app, mock_db, mocker, token_header):
    _, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = {**ORGANIZER, "status": "approved"}
    mock_hash = mocker.patch.object(app.extensions["password_hasher"], "hash")

    response = client.put("/organizers/5", json={"contact_no": "+1-555-0199"}, headers=token_header(5))

    assert response.status_code == 200
    mock_hash.assert_not_called()
    args, _ = mock_cursor.execute.call_args
    assert args[1] == (None, None, None, None, "+1-555-0199", None, 5)


def test_update_organizer_hash_failure(client, app, mocker, auth_header):
    mocker.patch.object(app.extensions["password_hasher"], "hash", side_effect=Exception("Hash Error"))

    response = client.put("/organizers/1", json={"password": "pass123"}, headers=auth_header)

    assert response.status_code == 500
    assert response.get_json() == {"message": "Error hashing password"}


def test_update_organizer_not_found(client, mock_db, token_header):
    mock_conn, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = None

    response = client.put("/organizers/999", json={"fname": "Nobody"}, headers=token_header(999))

    assert response.status_code == 404
    assert response.get_json() == {"message": "Organizer not found"}
    mock_conn.commit.assert_not_called()


def test_update_organizer_duplicate_email(client, mock_db, token_header):
    _, mock_cursor = mock_db()
    mock_cursor.execute.side_effect = psycopg2.errors.UniqueViolation("duplicate key")

    response = client.put("/organizers/3", json={"email": "existing@email.com"}, headers=token_header(3))

    assert response.status_code == 409
    assert response.get_json() == {"message": "Email (username) already registered"}


def test_delete_organizer(client, mock_db, auth_header):
    _, mock_cursor = mock_db()
    mock_cursor.fetchone.return_value = {**ORGANIZER, "status": "approved"}

    response = client.delete("/organizers/1", headers=auth_header)

    assert response.status_code == 200
    data = response.get_json()
    assert data["message"] == "Organizer deleted"
    assert "password_hash" not in data["organizer"]


def test_delete_organizer_db_error(client, mock_db, auth_header):
    _, mock_cursor = mock_db()
    mock_cursor.execute.side_effect = Exception("DB Error")

    response = client.delete("/organizers/1", headers=auth_header)

    assert response.status_code == 500
    assert response.get_json() == {"message": "Database error"}


def test_update_organizer_requires_token(client, mock_db):
    mock_conn, _ = mock_db()

    response = client.put("/organizers/1", json={"fname": "Mallory"})

    assert response.status_code == 401
    assert response.get_json() == {"message": "missing token"}
    mock_conn.cursor.assert_not_called()


def test_update_other_organizer_forbidden(client, mock_db, token_header):
    mock_conn, _ = mock_db()

    response = client.put("/organizers/1", json={"email": "mallory@mail.com"}, headers=token_header(2))

    assert response.status_code == 403
    assert response.get_json() == {"message": "Permission denied"}
    mock_conn.cursor.assert_not_called()


def test_delete_organizer_requires_token(client, mock_db):
    mock_conn, _ = mock_db()

    response = client.delete("/organizers/1")

    assert response.status_code == 401
    mock_conn.cursor.assert_not_called()


def test_delete_other_organizer_forbidden(client, mock_db, token_header):
    mock_conn, _ = mock_db()

    response = client.delete("/organizers/1", headers=token_header(2))

    assert response.status_code == 403
    assert response.get_json() == {"message": "Permission denied"}
    mock_conn.cursor.assert_not_called()


def test_update_organizer_rejects_approval_link_token(client, app, mock_db):
    mock_conn, _ = mock_db()
    token = app.extensions["token_issuer"].issue_approval(1)

    response = client.put(
        "/organizers/1", json={"fname": "X"}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.get_json() == {"message": "invalid token"}
    mock_conn.cursor.assert_not_called()
