"""
HTTP contract tests

These tests verify:
1. Error responses follow the {success, error, code} envelope
2. Status codes: 400 validation, 401 auth, 403 role, 404 missing, 409 conflict
3. Admin-only endpoints refuse committee members without mutating anything
4. The ballot -> results flow end to end
"""
from sqlalchemy import func, select

from halloffame.config.settings import get_settings
from halloffame.errors import ErrorCode
from halloffame.orm.nomination import Nomination
from halloffame.orm.user import User, UserRole
from halloffame.tests.helpers import TEST_PASSWORD, auth_headers, make_user


def assert_error(response, status_code, code=None):
    assert response.status_code == status_code
    data = response.json()
    assert data["success"] is False
    assert "error" in data
    if code:
        assert data["code"] == code
    return data


class TestHealth:

    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_unknown_route_uses_error_envelope(self, client):
        assert_error(await client.get("/api/does-not-exist"), 404, ErrorCode.NOT_FOUND)


class TestAuthentication:

    async def test_login_returns_token_and_identity(self, client, admin):
        response = await client.post("/api/auth/login", json={"username": "admin", "password": TEST_PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"] == {"id": admin.id, "username": "admin", "role": "admin"}

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["username"] == "admin"

    async def test_wrong_password_issues_no_token(self, client, admin):
        response = await client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
        data = assert_error(response, 401, ErrorCode.INVALID_CREDENTIALS)
        assert "token" not in data

    async def test_unknown_user_same_error(self, client):
        response = await client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
        assert_error(response, 401, ErrorCode.INVALID_CREDENTIALS)

    async def test_unknown_user_still_checks_a_hash(self, client, monkeypatch):
        calls = []

        async def fake_dummy_verify():
            calls.append(True)

        monkeypatch.setattr("halloffame.services.user_service.dummy_verify_async", fake_dummy_verify)
        response = await client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
        assert_error(response, 401, ErrorCode.INVALID_CREDENTIALS)
        assert calls == [True]

    async def test_no_token_is_401(self, client):
        response = await client.get("/api/ballot/my-selections")
        assert_error(response, 401, ErrorCode.AUTH_REQUIRED)
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_garbage_token_is_401(self, client):
        response = await client.get("/api/stats", headers={"Authorization": "Bearer garbage"})
        assert_error(response, 401, ErrorCode.AUTH_INVALID)

    async def test_token_of_deleted_user_is_401(self, client, admin, committee):
        response = await client.delete(f"/api/users/{committee.id}", headers=auth_headers(admin))
        assert response.status_code == 200

        response = await client.get("/api/auth/me", headers=auth_headers(committee))
        assert_error(response, 401, ErrorCode.AUTH_INVALID)

    async def test_change_password(self, client, committee):
        headers = auth_headers(committee)
        wrong = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "nope", "newPassword": "brand-new-pass"},
            headers=headers,
        )
        assert_error(wrong, 401)

        short = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "short"},
            headers=headers,
        )
        assert_error(short, 400)

        ok = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "brand-new-pass"},
            headers=headers,
        )
        assert ok.status_code == 200

        login = await client.post("/api/auth/login", json={"username": "member1", "password": "brand-new-pass"})
        assert login.status_code == 200


class TestUserManagement:

    async def test_register_by_admin(self, client, admin):
        response = await client.post(
            "/api/auth/register",
            json={"username": "member9", "password": "secret123", "role": "committee"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User created successfully"
        assert isinstance(data["userId"], int)

    async def test_duplicate_username_is_409(self, client, admin, committee):
        response = await client.post(
            "/api/auth/register",
            json={"username": "member1", "password": "secret123", "role": "committee"},
            headers=auth_headers(admin),
        )
        assert_error(response, 409, ErrorCode.USERNAME_TAKEN)

    async def test_invalid_role_is_400(self, client, admin):
        response = await client.post(
            "/api/auth/register",
            json={"username": "x", "password": "secret123", "role": "superuser"},
            headers=auth_headers(admin),
        )
        assert_error(response, 400, ErrorCode.VALIDATION_ERROR)

    async def test_committee_cannot_delete_users(self, client, database, admin, committee):
        response = await client.delete(f"/api/users/{admin.id}", headers=auth_headers(committee))
        assert_error(response, 403, ErrorCode.FORBIDDEN)

        async with database.session() as session:
            assert await session.get(User, admin.id) is not None

    async def test_committee_cannot_register(self, client, database, committee):
        response = await client.post(
            "/api/auth/register",
            json={"username": "sneaky", "password": "secret123", "role": "admin"},
            headers=auth_headers(committee),
        )
        assert_error(response, 403)

        async with database.session() as session:
            result = await session.execute(select(User).where(User.username == "sneaky"))
            assert result.scalar_one_or_none() is None

    async def test_admin_cannot_delete_self(self, client, admin):
        response = await client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))
        assert_error(response, 403, ErrorCode.SELF_DELETION)

    async def test_delete_unknown_user(self, client, admin):
        response = await client.delete("/api/users/999", headers=auth_headers(admin))
        assert_error(response, 404, ErrorCode.USER_NOT_FOUND)

    async def test_list_users_newest_first(self, client, admin, committee):
        response = await client.get("/api/users", headers=auth_headers(admin))
        assert response.status_code == 200
        users = response.json()
        assert [u["username"] for u in users] == ["member1", "admin"]
        assert "password_hash" not in users[0]


class TestSetup:

    async def test_setup_creates_admin_and_committee(self, client):
        payload = {
            "setupKey": get_settings().SETUP_KEY,
            "adminUsername": "chair",
            "adminPassword": "chair-password",
            "committeeMembers": [
                {"name": "Jane Doe", "username": "jdoe", "email": "jane@example.com"},
                {"name": "Max Roe", "username": "mroe"},
            ],
        }
        response = await client.post("/api/setup", json=payload)
        assert response.status_code == 201
        credentials = response.json()["credentials"]
        assert [c["username"] for c in credentials] == ["chair", "jdoe", "mroe"]
        assert [c["role"] for c in credentials] == ["admin", "committee", "committee"]
        assert len(credentials[1]["password"]) == 12

        login = await client.post(
            "/api/auth/login", json={"username": "jdoe", "password": credentials[1]["password"]}
        )
        assert login.status_code == 200

        again = await client.post("/api/setup", json=payload)
        assert_error(again, 400, ErrorCode.SETUP_COMPLETED)

    async def test_wrong_setup_key(self, client, database):
        response = await client.post(
            "/api/setup",
            json={"setupKey": "guess", "adminUsername": "chair", "adminPassword": "pw"},
        )
        assert_error(response, 403)

        async with database.session() as session:
            assert (await session.execute(select(func.count()).select_from(User))).scalar() == 0


class TestNominations:

    async def test_admin_crud(self, client, admin):
        headers = auth_headers(admin)
        created = await client.post(
            "/api/nominations",
            json={"person_name": "Jane Doe", "person_year": 2001, "merit_awards": "Gold"},
            headers=headers,
        )
        assert created.status_code == 201
        nomination = created.json()
        assert nomination["person_name"] == "Jane Doe"
        assert nomination["person_year"] == "2001"
        assert nomination["career_position"] is None
        assert nomination["created_by"] == admin.id

        updated = await client.put(
            f"/api/nominations/{nomination['id']}",
            json={"career_position": "Surgeon"},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["career_position"] == "Surgeon"
        assert updated.json()["merit_awards"] == "Gold"

        deleted = await client.delete(f"/api/nominations/{nomination['id']}", headers=headers)
        assert deleted.status_code == 200
        missing = await client.get(f"/api/nominations/{nomination['id']}", headers=headers)
        assert_error(missing, 404, ErrorCode.NOMINATION_NOT_FOUND)

    async def test_create_requires_name(self, client, admin):
        response = await client.post("/api/nominations", json={"year": 2001}, headers=auth_headers(admin))
        assert_error(response, 400, ErrorCode.VALIDATION_ERROR)

    async def test_update_cannot_blank_name(self, client, admin):
        headers = auth_headers(admin)
        created = (await client.post("/api/nominations", json={"name": "Jane"}, headers=headers)).json()
        response = await client.put(f"/api/nominations/{created['id']}", json={"name": ""}, headers=headers)
        assert_error(response, 400)

    async def test_committee_reads_but_cannot_write(self, client, database, admin, committee):
        await client.post("/api/nominations", json={"name": "Jane Doe"}, headers=auth_headers(admin))

        listing = await client.get("/api/nominations", headers=auth_headers(committee))
        assert listing.status_code == 200
        assert len(listing.json()) == 1
        nomination_id = listing.json()[0]["id"]

        for response in (
            await client.post("/api/nominations", json={"name": "Max"}, headers=auth_headers(committee)),
            await client.put(f"/api/nominations/{nomination_id}", json={"name": "X"}, headers=auth_headers(committee)),
            await client.delete(f"/api/nominations/{nomination_id}", headers=auth_headers(committee)),
        ):
            assert_error(response, 403)

        async with database.session() as session:
            nomination = await session.get(Nomination, nomination_id)
            assert nomination.name == "Jane Doe"

    async def test_bulk_import_partial_success(self, client, database, admin):
        response = await client.post(
            "/api/admin/import-nominations",
            json={"nominations": [
                {"name": "Jane Doe", "year": 2001},
                {"year": 1999, "nomination_summary": "No name given"},
                {"name": "Max Roe", "year": "1980"},
            ]},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["successCount"] == 2
        assert data["errorCount"] == 1
        assert data["errors"] == [{"row": 2, "reason": "Missing name"}]

        async with database.session() as session:
            assert (await session.execute(select(func.count()).select_from(Nomination))).scalar() == 2

    async def test_bulk_import_skips_non_object_rows(self, client, database, admin):
        response = await client.post(
            "/api/admin/import-nominations",
            json={"nominations": [{"name": "Jane Doe"}, "garbage", None, {"name": "Max Roe"}]},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["successCount"] == 2
        assert data["errors"] == [
            {"row": 2, "reason": "Row is not an object"},
            {"row": 3, "reason": "Row is not an object"},
        ]

        async with database.session() as session:
            assert (await session.execute(select(func.count()).select_from(Nomination))).scalar() == 2

    async def test_bulk_import_rejects_empty_batch(self, client, admin):
        response = await client.post(
            "/api/admin/import-nominations", json={"nominations": []}, headers=auth_headers(admin)
        )
        assert_error(response, 400)

    async def test_bulk_import_admin_only(self, client, committee):
        response = await client.post(
            "/api/admin/import-nominations",
            json={"nominations": [{"name": "Jane"}]},
            headers=auth_headers(committee),
        )
        assert_error(response, 403)


class TestPeople:

    async def test_people_and_person_nominations(self, client, admin, committee):
        headers = auth_headers(admin)
        for payload in ({"name": "Jane Doe", "year": 2001}, {"name": "Jane Doe", "year": 2001}, {"name": "Max Roe"}):
            await client.post("/api/nominations", json=payload, headers=headers)

        people = await client.get("/api/people", headers=auth_headers(committee))
        assert people.json() == [
            {"person_name": "Jane Doe", "person_year": "2001", "nomination_count": 2},
            {"person_name": "Max Roe", "person_year": None, "nomination_count": 1},
        ]

        jane = await client.get("/api/people/Jane Doe/2001/nominations", headers=auth_headers(committee))
        assert jane.status_code == 200
        assert len(jane.json()) == 2

        max_roe = await client.get("/api/people/Max Roe/nominations", headers=auth_headers(committee))
        assert len(max_roe.json()) == 1

    async def test_blank_year_is_the_unknown_year(self, client, admin, committee):
        created = await client.post(
            "/api/nominations", json={"name": "Blank Year", "year": ""}, headers=auth_headers(admin)
        )
        assert created.status_code == 201
        assert created.json()["person_year"] is None

        people = await client.get("/api/people", headers=auth_headers(committee))
        assert people.json() == [{"person_name": "Blank Year", "person_year": None, "nomination_count": 1}]

        nominations = await client.get("/api/people/Blank Year/nominations", headers=auth_headers(committee))
        assert nominations.status_code == 200
        assert [n["id"] for n in nominations.json()] == [created.json()["id"]]

    async def test_unknown_person_is_404(self, client, committee):
        response = await client.get("/api/people/Nobody/1900/nominations", headers=auth_headers(committee))
        data = assert_error(response, 404, ErrorCode.PERSON_NOT_FOUND)
        assert data["error"] == "No nominations found for this person"


class TestBallotAndResults:

    async def test_ballot_to_results_scenario(self, client, admin, committee):
        created = await client.post(
            "/api/nominations",
            json={"person_name": "Jane Doe", "person_year": 2001},
            headers=auth_headers(admin),
        )
        assert created.status_code == 201

        saved = await client.post(
            "/api/ballot",
            json={"selections": [{"person_name": "Jane Doe", "person_year": "2001"}]},
            headers=auth_headers(committee),
        )
        assert saved.status_code == 200
        assert saved.json() == {"message": "Ballot saved successfully", "count": 1}

        mine = await client.get("/api/ballot/my-selections", headers=auth_headers(committee))
        assert [(s["person_name"], s["person_year"]) for s in mine.json()] == [("Jane Doe", "2001")]

        results = await client.get("/api/results", headers=auth_headers(committee))
        assert results.status_code == 200
        [entry] = results.json()
        assert entry["person_name"] == "Jane Doe"
        assert entry["person_year"] == "2001"
        assert entry["selection_count"] == 1
        assert entry["total_committee"] == 1
        assert entry["percentage"] == 100
        assert "voters" not in entry

        admin_view = await client.get("/api/results", headers=auth_headers(admin))
        assert admin_view.json()[0]["voters"] == [{"id": committee.id, "username": "member1"}]

    async def test_nine_selections_rejected(self, client, committee):
        headers = auth_headers(committee)
        await client.post(
            "/api/ballot", json={"selections": [{"person_name": "Keep Me", "person_year": "2000"}]}, headers=headers
        )

        selections = [{"person_name": f"Person {i}", "person_year": "2000"} for i in range(9)]
        response = await client.post("/api/ballot", json={"selections": selections}, headers=headers)
        data = assert_error(response, 400, ErrorCode.TOO_MANY_SELECTIONS)
        assert data["error"] == "Maximum 8 selections allowed"

        mine = await client.get("/api/ballot/my-selections", headers=headers)
        assert [s["person_name"] for s in mine.json()] == ["Keep Me"]

    async def test_duplicate_selection_rejected(self, client, committee):
        selections = [{"person_name": "Jane Doe", "person_year": "2001"}] * 2
        response = await client.post("/api/ballot", json={"selections": selections}, headers=auth_headers(committee))
        assert_error(response, 400, ErrorCode.DUPLICATE_SELECTION)

    async def test_selections_must_be_a_list(self, client, committee):
        response = await client.post("/api/ballot", json={"selections": "Jane"}, headers=auth_headers(committee))
        data = assert_error(response, 400, ErrorCode.VALIDATION_ERROR)
        assert data["details"]["errors"]

    async def test_stats(self, client, database, admin, committee):
        await make_user(database, "member2", UserRole.committee)
        await client.post("/api/nominations", json={"name": "Jane Doe", "year": 2001}, headers=auth_headers(admin))
        await client.post(
            "/api/ballot",
            json={"selections": [{"person_name": "Jane Doe", "person_year": 2001}]},
            headers=auth_headers(committee),
        )

        response = await client.get("/api/stats", headers=auth_headers(committee))
        assert response.json() == {
            "totalPeople": 1,
            "totalNominations": 1,
            "totalCommitteeMembers": 2,
            "mySelectionsCount": 1,
        }
