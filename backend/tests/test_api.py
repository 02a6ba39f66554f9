"""
HTTP surface tests: authentication, the three views and the admin-users
endpoints, through FastAPI's TestClient.
"""
from eco_admin.models.db_models import ProjectUserDB, TrashLocationDB

from conftest import bearer


# =============================================================================
# AUTHENTICATION
# =============================================================================

class TestAuthentication:
    """Tests for bearer-token authentication."""

    def test_missing_token(self, api):
        """Requests without a token are refused."""
        response = api.get("/users")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, api):
        """A malformed token is a 401."""
        response = api.get("/users", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_inactive_operator(self, api, inactive_row):
        """A token for an inactive operator is refused with 403."""
        response = api.get("/logs", headers=bearer(inactive_row))
        assert response.status_code == 403

    def test_public_endpoints(self, api):
        """Root and health need no token."""
        assert api.get("/health").json()["status"] == "healthy"
        assert api.get("/").json()["views"] == ["map", "logs", "users"]


# =============================================================================
# DASHBOARD
# =============================================================================

class TestDashboard:
    """Tests for the /dashboard endpoint."""

    def test_default_view_is_map(self, api, admin_headers):
        """The map view is mounted by default."""
        body = api.get("/dashboard", headers=admin_headers).json()
        assert body["current"] == "map"
        assert [item["id"] for item in body["items"]] == ["map", "logs", "users"]
        assert body["items"][0]["label"] == "Карта мусора"
        assert body["operator"]["role"] == "admin"

    def test_unknown_view_falls_back_to_map(self, api, admin_headers):
        """An unknown view name falls back to the map."""
        body = api.get("/dashboard", params={"view": "reports"}, headers=admin_headers).json()
        assert body["current"] == "map"


# =============================================================================
# USERS
# =============================================================================

class TestUsersEndpoints:
    """Tests for the /users endpoints."""

    def test_search(self, api, admin_headers, project_users):
        """Search is case-insensitive over Cyrillic names."""
        body = api.get("/users", params={"search": "мар"}, headers=admin_headers).json()
        assert body["total"] == 3
        assert [u["full_name"] for u in body["users"]] == ["Мария Сидорова"]

    def test_reports_count_reflects_locations(self, api, admin_headers, locations):
        """reports_count counts each user's reports."""
        body = api.get("/users", headers=admin_headers).json()
        counts = {u["email"]: u["reports_count"] for u in body["users"]}
        assert counts == {"user1@example.com": 2, "user2@example.com": 1, "user3@example.com": 0}

    def test_create(self, api, admin_headers, project_users):
        """Creating a user answers with the re-fetched list."""
        response = api.post("/users", json={
            "email": "new@example.com",
            "full_name": "Ольга Новикова",
            "phone": "",
        }, headers=admin_headers)
        body = response.json()
        assert response.status_code == 200
        assert body["ok"] is True
        assert body["add_form_open"] is False
        assert body["total"] == 4

    def test_create_duplicate_keeps_form_open(self, api, admin_headers, project_users):
        """A duplicate email answers ok=false with the form still open."""
        body = api.post("/users", json={
            "email": "user1@example.com",
            "full_name": "Дубль",
        }, headers=admin_headers).json()
        assert body["ok"] is False
        assert body["add_form_open"] is True
        assert body["total"] == 3

    def test_create_requires_valid_email(self, api, admin_headers):
        """Malformed emails are rejected by the request model."""
        response = api.post("/users", json={"email": "nope", "full_name": "X"}, headers=admin_headers)
        assert response.status_code == 422

    def test_edit(self, api, admin_headers, db, project_users):
        """An edit writes only the submitted fields."""
        user_id = project_users[2]["id"]
        body = api.patch(f"/users/{user_id}", json={"phone": "+7 999 000-00-00"}, headers=admin_headers).json()
        assert body["ok"] is True
        assert body["editing_id"] is None

        db.expire_all()
        user = db.get(ProjectUserDB, user_id)
        assert user.phone == "+7 999 000-00-00"
        assert user.full_name == "Алексей Козлов"

    def test_edit_rejects_null_name_and_email(self, api, admin_headers, db, project_users):
        """Explicit null for name or email is a 422 and writes nothing."""
        user_id = project_users[0]["id"]
        for field in ("full_name", "email"):
            response = api.patch(f"/users/{user_id}", json={field: None}, headers=admin_headers)
            assert response.status_code == 422

        db.expire_all()
        user = db.get(ProjectUserDB, user_id)
        assert user.full_name == "Иван Петров"
        assert user.email == "user1@example.com"

    def test_edit_can_clear_phone(self, api, admin_headers, db, project_users):
        """Phone is the one field that may be cleared with null."""
        user_id = project_users[0]["id"]
        body = api.patch(f"/users/{user_id}", json={"phone": None}, headers=admin_headers).json()
        assert body["ok"] is True

        db.expire_all()
        assert db.get(ProjectUserDB, user_id).phone is None

    def test_summary_counts(self, api, admin_headers, locations):
        """The list carries active-user and total-report counts."""
        body = api.get("/users", params={"search": "иван"}, headers=admin_headers).json()
        assert body["visible"] == 1
        assert body["active_count"] == 3
        assert body["reports_total"] == 3

    def test_edit_unknown_user(self, api, admin_headers, project_users):
        """Unknown user ids return 404."""
        response = api.patch("/users/missing", json={"full_name": "X"}, headers=admin_headers)
        assert response.status_code == 404

    def test_toggle_active(self, api, admin_headers, db, project_users):
        """Toggling deactivates the user and re-renders the label."""
        user_id = project_users[0]["id"]
        body = api.post(f"/users/{user_id}/toggle-active", headers=admin_headers).json()
        assert body["ok"] is True
        row = next(u for u in body["users"] if u["id"] == user_id)
        assert row["is_active"] is False
        assert row["active_label"] == "Неактивен"

        db.expire_all()
        assert db.get(ProjectUserDB, user_id).is_active is False

    def test_viewer_can_toggle(self, api, viewer_headers, project_users):
        """Viewers may toggle project users."""
        user_id = project_users[0]["id"]
        body = api.post(f"/users/{user_id}/toggle-active", headers=viewer_headers).json()
        assert body["ok"] is True


# =============================================================================
# MAP
# =============================================================================

class TestMapEndpoints:
    """Tests for the /map endpoints."""

    def test_markers_and_legend(self, api, admin_headers, locations):
        """Map settings, one marker per report and the four-status legend."""
        body = api.get("/map", headers=admin_headers).json()
        assert body["map"]["center"] == [55.7558, 37.6173]
        assert body["map"]["zoom"] == 10
        assert len(body["markers"]) == 4
        assert [item["status"] for item in body["legend"]] == ["reported", "in_progress", "cleaned", "rejected"]
        assert body["selected"] is None

    def test_status_filter(self, api, admin_headers, locations):
        """The status filter narrows the markers."""
        body = api.get("/map", params={"status": "cleaned"}, headers=admin_headers).json()
        assert body["status"] == "cleaned"
        assert [m["color"] for m in body["markers"]] == ["green"]

    def test_unknown_status_filter(self, api, admin_headers, locations):
        """An unknown status filter is a 422."""
        response = api.get("/map", params={"status": "archived"}, headers=admin_headers)
        assert response.status_code == 422

    def test_detail(self, api, admin_headers, locations):
        """The detail panel offers every status but the current one."""
        location_id = locations[2]["id"]
        body = api.get(f"/map/locations/{location_id}", headers=admin_headers).json()
        assert body["status_label"] == "Очищено"
        assert body["project_user_name"] == "Мария Сидорова"
        assert body["cleaned_display"] == "07.10.2025, 12:02"
        assert [a["status"] for a in body["actions"]] == ["in_progress", "rejected", "reported"]

    def test_detail_unknown(self, api, admin_headers, locations):
        """Unknown location ids return 404."""
        assert api.get("/map/locations/missing", headers=admin_headers).status_code == 404

    def test_status_change(self, api, admin_headers, db, locations):
        """Moving to cleaned stamps cleaned_at and recolors the marker."""
        location_id = locations[0]["id"]
        response = api.post(
            f"/map/locations/{location_id}/status",
            json={"status": "cleaned"},
            headers=admin_headers,
        )
        body = response.json()
        assert response.status_code == 200
        assert body["ok"] is True
        assert body["selected"] is None
        marker = next(m for m in body["markers"] if m["id"] == location_id)
        assert marker["preset"] == "islands#greenIcon"

        db.expire_all()
        location = db.get(TrashLocationDB, location_id)
        assert location.status == "cleaned"
        assert location.cleaned_at is not None

    def test_status_change_is_audited(self, api, admin_headers, admin_row, service, locations):
        """A move is logged with the acting operator and both statuses."""
        api.post(
            f"/map/locations/{locations[1]['id']}/status",
            json={"status": "rejected"},
            headers=admin_headers,
        )
        entries = service.select("system_logs", filters={"action": "trash_status_changed"})
        assert len(entries) == 1
        assert entries[0]["user_id"] == admin_row["id"]
        assert entries[0]["details"]["from"] == "in_progress"
        assert entries[0]["details"]["to"] == "rejected"

    def test_status_change_to_current_status(self, api, admin_headers, db, locations):
        """Re-selecting a report's current status is a 422 and keeps cleaned_at."""
        location_id = locations[2]["id"]
        response = api.post(
            f"/map/locations/{location_id}/status",
            json={"status": "cleaned"},
            headers=admin_headers,
        )
        assert response.status_code == 422

        db.expire_all()
        location = db.get(TrashLocationDB, location_id)
        assert location.status == "cleaned"
        assert location.cleaned_at == locations[2]["cleaned_at"]
        assert location.updated_at == locations[2]["updated_at"]

    def test_invalid_status(self, api, admin_headers, locations):
        """A status outside the enum is a 422."""
        response = api.post(
            f"/map/locations/{locations[0]['id']}/status",
            json={"status": "archived"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_status_change_on_hidden_marker(self, api, admin_headers, locations):
        """A marker hidden by the status filter cannot be acted on."""
        response = api.post(
            f"/map/locations/{locations[0]['id']}/status",
            params={"status": "cleaned"},
            json={"status": "rejected"},
            headers=admin_headers,
        )
        assert response.status_code == 404


# =============================================================================
# LOGS
# =============================================================================

class TestLogsEndpoints:
    """Tests for the /logs endpoint."""

    def test_newest_first(self, api, admin_headers, log_entries):
        """Entries come newest first with second-precision timestamps."""
        body = api.get("/logs", headers=admin_headers).json()
        assert body["total"] == 5
        assert body["logs"][0]["action"] == "database_connection_error"
        assert body["logs"][0]["created_display"] == "07.10.2025, 12:04:00"

    def test_critical_is_empty(self, api, admin_headers, log_entries):
        """A level with no entries returns an empty list."""
        response = api.get("/logs", params={"level": "critical"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["logs"] == []

    def test_search(self, api, admin_headers, log_entries):
        """Search matches the entity type."""
        body = api.get("/logs", params={"search": "project"}, headers=admin_headers).json()
        assert [entry["action"] for entry in body["logs"]] == ["user_updated"]


# =============================================================================
# ADMIN USERS
# =============================================================================

class TestAdminUsersEndpoints:
    """Tests for the /admin-users endpoints."""

    def test_list(self, api, viewer_headers, admin_row, viewer_row):
        """Any operator lists the operator accounts with role labels."""
        body = api.get("/admin-users", headers=viewer_headers).json()
        assert body["total"] == 2
        assert {row["role_label"] for row in body["admin_users"]} == {"Администратор", "Наблюдатель"}

    def test_viewer_cannot_update(self, api, viewer_headers, admin_row):
        """Viewers cannot write operator accounts."""
        response = api.patch(f"/admin-users/{admin_row['id']}", json={"role": "viewer"}, headers=viewer_headers)
        assert response.status_code == 403

    def test_admin_updates_role(self, api, admin_headers, viewer_row):
        """An admin changes another operator's role."""
        body = api.patch(
            f"/admin-users/{viewer_row['id']}",
            json={"role": "moderator"},
            headers=admin_headers,
        ).json()
        assert body["ok"] is True
        row = next(r for r in body["admin_users"] if r["id"] == viewer_row["id"])
        assert row["role"] == "moderator"

    def test_empty_update(self, api, admin_headers, viewer_row):
        """A patch with no fields is a 422."""
        response = api.patch(f"/admin-users/{viewer_row['id']}", json={}, headers=admin_headers)
        assert response.status_code == 422

    def test_unknown_admin(self, api, admin_headers):
        """Unknown admin ids return 404."""
        response = api.patch("/admin-users/missing", json={"is_active": False}, headers=admin_headers)
        assert response.status_code == 404
