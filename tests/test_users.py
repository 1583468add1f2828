"""
Test suite for user endpoints and job applications.

Tests:
- Admin-only user creation and listing
- Same-user-or-admin access to a user's profile
- Applying to jobs
"""

import pytest

from jobly.core.database import execute
from jobly.core.security import decode_token
from jobly.crud import user as user_crud


U1 = {
    "username": "u1",
    "firstName": "U1F",
    "lastName": "U1L",
    "email": "user1@user.com",
    "isAdmin": False,
}


class TestUserCreation:
    """Tests for POST /users"""

    new_user = {
        "username": "u-new",
        "firstName": "First-new",
        "lastName": "Last-newL",
        "password": "password-new",
        "email": "new@email.com",
        "isAdmin": False,
    }

    def test_create_non_admin(self, client, job_ids, admin_token):
        response = client.post(
            "/users",
            json=self.new_user,
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == {
            "username": "u-new",
            "firstName": "First-new",
            "lastName": "Last-newL",
            "email": "new@email.com",
            "isAdmin": False,
        }
        assert decode_token(data["token"])["username"] == "u-new"

    def test_create_admin(self, client, job_ids, admin_token):
        response = client.post(
            "/users",
            json={**self.new_user, "username": "u-admin", "isAdmin": True},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["isAdmin"] is True
        assert decode_token(response.json()["token"])["isAdmin"] is True

    def test_non_admin_forbidden(self, client, job_ids, u1_token):
        response = client.post(
            "/users",
            json=self.new_user,
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 401

    def test_anonymous_forbidden(self, client, job_ids):
        response = client.post("/users", json=self.new_user)

        assert response.status_code == 401

    def test_missing_data(self, client, job_ids, admin_token):
        response = client.post(
            "/users",
            json={"username": "u-new"},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 400

    def test_invalid_email(self, client, job_ids, admin_token):
        response = client.post(
            "/users",
            json={**self.new_user, "email": "not-an-email"},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 400


class TestUserListing:
    """Tests for GET /users"""

    def test_list_as_admin(self, client, job_ids, admin_token):
        response = client.get("/users", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.status_code == 200
        assert response.json() == {
            "users": [
                {
                    "username": "admin",
                    "firstName": "AdminF",
                    "lastName": "AdminL",
                    "email": "admin@admin.com",
                    "isAdmin": True,
                },
                U1,
                {
                    "username": "u2",
                    "firstName": "U2F",
                    "lastName": "U2L",
                    "email": "user2@user.com",
                    "isAdmin": False,
                },
            ]
        }

    def test_list_non_admin(self, client, job_ids, u1_token):
        response = client.get("/users", headers={"Authorization": f"Bearer {u1_token}"})

        assert response.status_code == 401

    def test_database_failure(self, client, db_session, job_ids, admin_token):
        execute(db_session, "DROP TABLE applications")
        execute(db_session, "DROP TABLE users")
        db_session.commit()

        response = client.get("/users", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.status_code == 500


class TestUserRetrieval:
    """Tests for GET /users/{username}"""

    def test_get_same_user(self, client, job_ids, u1_token):
        response = client.get("/users/u1", headers={"Authorization": f"Bearer {u1_token}"})

        assert response.status_code == 200
        assert response.json() == {"user": {**U1, "jobs": []}}

    def test_get_as_admin(self, client, job_ids, admin_token):
        response = client.get("/users/u1", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.json() == {"user": {**U1, "jobs": []}}

    def test_get_other_user(self, client, job_ids, u2_token):
        response = client.get("/users/u1", headers={"Authorization": f"Bearer {u2_token}"})

        assert response.status_code == 401

    def test_get_anonymous(self, client, job_ids):
        response = client.get("/users/u1")

        assert response.status_code == 401

    def test_not_found(self, client, job_ids, admin_token):
        response = client.get("/users/nope", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.status_code == 404


class TestUserUpdate:
    """Tests for PATCH /users/{username}"""

    def test_update_same_user(self, client, job_ids, u1_token):
        response = client.patch(
            "/users/u1",
            json={"firstName": "New"},
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"user": {**U1, "firstName": "New"}}

    def test_update_other_user(self, client, job_ids, u2_token):
        response = client.patch(
            "/users/u1",
            json={"firstName": "Hacker"},
            headers={"Authorization": f"Bearer {u2_token}"},
        )

        assert response.status_code == 401

    def test_not_found(self, client, job_ids, admin_token):
        response = client.patch(
            "/users/nope",
            json={"firstName": "Nope"},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 404

    def test_invalid_data(self, client, job_ids, u1_token):
        response = client.patch(
            "/users/u1",
            json={"firstName": 42},
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("body", [
        {"firstName": None},
        {"lastName": None},
        {"email": None},
        {"password": None},
    ])
    def test_null_field(self, client, job_ids, u1_token, body):
        response = client.patch(
            "/users/u1",
            json=body,
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["status"] == 400

    def test_cannot_make_self_admin(self, client, job_ids, u1_token):
        response = client.patch(
            "/users/u1",
            json={"isAdmin": True},
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 400

    def test_set_new_password(self, client, db_session, job_ids, u1_token):
        response = client.patch(
            "/users/u1",
            json={"password": "new-password"},
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.json() == {"user": U1}
        assert user_crud.authenticate(db_session, "u1", "new-password")["username"] == "u1"


class TestUserDeletion:
    """Tests for DELETE /users/{username}"""

    def test_delete_same_user(self, client, job_ids, u1_token):
        response = client.delete("/users/u1", headers={"Authorization": f"Bearer {u1_token}"})

        assert response.json() == {"deleted": "u1"}

    def test_delete_as_admin(self, client, job_ids, admin_token):
        response = client.delete("/users/u2", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.json() == {"deleted": "u2"}

    def test_delete_other_user(self, client, job_ids, u2_token):
        response = client.delete("/users/u1", headers={"Authorization": f"Bearer {u2_token}"})

        assert response.status_code == 401

    def test_not_found(self, client, job_ids, admin_token):
        response = client.delete("/users/nope", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.status_code == 404


class TestApplyToJob:
    """Tests for POST /users/{username}/jobs/{job_id}"""

    def test_apply_same_user(self, client, job_ids, u1_token):
        response = client.post(
            f"/users/u1/jobs/{job_ids[0]}",
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"applied": job_ids[0]}

        user = client.get("/users/u1", headers={"Authorization": f"Bearer {u1_token}"})
        assert user.json()["user"]["jobs"] == [job_ids[0]]

    def test_apply_as_admin(self, client, job_ids, admin_token):
        response = client.post(
            f"/users/u1/jobs/{job_ids[0]}",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.json() == {"applied": job_ids[0]}

    def test_apply_for_other_user(self, client, job_ids, u2_token):
        response = client.post(
            f"/users/u1/jobs/{job_ids[0]}",
            headers={"Authorization": f"Bearer {u2_token}"},
        )

        assert response.status_code == 401

    def test_apply_anonymous(self, client, job_ids):
        response = client.post(f"/users/u1/jobs/{job_ids[0]}")

        assert response.status_code == 401

    def test_unknown_user(self, client, job_ids, admin_token):
        response = client.post(
            f"/users/nope/jobs/{job_ids[0]}",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 404

    def test_unknown_job(self, client, job_ids, admin_token):
        response = client.post(
            "/users/u1/jobs/999999",
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 404

    def test_already_applied(self, client, db_session, job_ids, u1_token):
        user_crud.apply_to_job(db_session, "u1", job_ids[0])

        response = client.post(
            f"/users/u1/jobs/{job_ids[0]}",
            headers={"Authorization": f"Bearer {u1_token}"},
        )

        assert response.status_code == 400
