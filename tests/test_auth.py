from jose import jwt


def count(db, table):
    return db.fetch_one(f"SELECT COUNT(*) AS n FROM {table}")["n"]


def test_register_returns_student_with_guardian(client, make_registration, auth_headers):
    payload = make_registration()
    response = client.post("/auth/register", json=payload)

    assert response.status_code == 201
    created = response.json()
    assert created["firstName"] == "John"
    assert created["admissioNo"] == "SCH-001"
    assert created["dob"] == "2010-01-15"
    assert created["guardian_name"] == "Jane Doe"
    assert created["guardian_email"] == "guardian1@example.com"
    assert "password" not in created

    fetched = client.get(f"/students/{created['id']}", headers=auth_headers).json()
    assert fetched == created


def test_register_hashes_password(client, db, register):
    student = register()
    row = db.fetch_one("SELECT password FROM students WHERE id = :id", {"id": student["id"]})
    assert row["password"] != "password123"
    assert row["password"].startswith("$2")


def test_register_reuses_existing_guardian(client, db, register):
    first = register(1, guardianEmail="shared@example.com")
    second = register(2, guardianEmail="shared@example.com", guardianName="Someone Else")

    assert count(db, "guardians") == 1
    assert first["guardian_id"] == second["guardian_id"]
    # the existing guardian row is linked, not overwritten
    assert second["guardian_name"] == "Jane Doe"


def test_register_duplicate_email_leaves_no_orphan_guardian(client, db, register, make_registration):
    register(1)
    response = client.post(
        "/auth/register",
        json=make_registration(2, email="student1@example.com"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "A student with this email already exists."
    assert count(db, "students") == 1
    assert count(db, "guardians") == 1


def test_register_duplicate_admission_number(client, db, register, make_registration):
    register(1)
    response = client.post("/auth/register", json=make_registration(2, admissioNo="SCH-001"))

    assert response.status_code == 400
    assert response.json()["detail"] == "A student with this admission number already exists."
    assert count(db, "guardians") == 1


def test_register_validation_reports_first_failing_field(client, make_registration):
    payload = make_registration()
    del payload["lastName"]

    response = client.post("/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("lastName:")


def test_register_rejects_invalid_enum_and_unknown_fields(client, make_registration):
    response = client.post("/auth/register", json=make_registration(bloodgroup="C+"))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("bloodgroup:")

    response = client.post("/auth/register", json=make_registration(nickname="JD"))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("nickname:")


def test_register_allows_empty_middle_name_but_not_one_letter(client, make_registration):
    assert client.post("/auth/register", json=make_registration(1, middleName="")).status_code == 201
    assert client.post("/auth/register", json=make_registration(2, middleName="R")).status_code == 400


def test_login_returns_token_with_student_claims(client, register, settings_env):
    student = register()
    response = client.post(
        "/auth/login", json={"email": "student1@example.com", "password": "password123"}
    )

    assert response.status_code == 200
    claims = jwt.decode(
        response.json()["token"], settings_env.jwt_secret_key, algorithms=[settings_env.jwt_algorithm]
    )
    assert claims["id"] == student["id"]
    assert claims["email"] == "student1@example.com"
    assert claims["name"] == "John"
    assert claims["role"] == "student"
    assert "exp" in claims


def test_login_failures_share_one_message(client, register):
    register()
    wrong_password = client.post(
        "/auth/login", json={"email": "student1@example.com", "password": "not-the-password"}
    )
    unknown_email = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "password123"}
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password"}


def test_me_returns_token_claims(client, register):
    register()
    token = client.post(
        "/auth/login", json={"email": "student1@example.com", "password": "password123"}
    ).json()["token"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "student1@example.com"


def test_register_rejects_nul_byte_in_password(client, db, make_registration):
    response = client.post("/auth/register", json=make_registration(password="abc\x00defgh"))

    assert response.status_code == 400
    assert response.json()["detail"].startswith("password:")
    assert count(db, "students") == 0
    assert count(db, "guardians") == 0
