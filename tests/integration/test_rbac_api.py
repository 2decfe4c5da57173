# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for the role and module API."""

from backoffice.rbac.modules import DEFAULT_MODULES
from backoffice.services import rbac_service


def module_ids(client) -> dict[str, str]:
    return {m["code"]: m["id"] for m in client.get("/api/v1/modules").json()}


def test_list_modules(sales_client):
    response = sales_client.get("/api/v1/modules")

    assert response.status_code == 200
    assert [m["code"] for m in response.json()] == [
        m["code"] for m in DEFAULT_MODULES
    ]


def test_list_roles_requires_session(client):
    assert client.get("/api/v1/roles").status_code == 401


def test_create_role_requires_admin(sales_client):
    response = sales_client.post("/api/v1/roles", json={"name": "auditor"})
    assert response.status_code == 403


class TestRoleLifecycle:
    def test_create_update_delete(self, admin_client):
        created = admin_client.post(
            "/api/v1/roles", json={"name": "auditor", "description": "Read only"}
        )
        assert created.status_code == 201
        role = created.json()
        assert role["kind"] == "scoped"
        assert role["is_system"] is False

        updated = admin_client.put(
            f"/api/v1/roles/{role['id']}", json={"name": "controller"}
        )
        assert updated.json()["name"] == "controller"

        deleted = admin_client.delete(f"/api/v1/roles/{role['id']}")
        assert deleted.status_code == 204
        assert admin_client.get(f"/api/v1/roles/{role['id']}").status_code == 404

    def test_duplicate_name(self, admin_client):
        response = admin_client.post("/api/v1/roles", json={"name": "sales"})
        assert response.status_code == 409

    def test_system_role_cannot_be_deleted(self, admin_client, db_store):
        admin_role = rbac_service.get_role_by_name(db_store, "admin")

        response = admin_client.delete(f"/api/v1/roles/{admin_role.id}")

        assert response.status_code == 409
        assert response.json() == {"detail": "System roles cannot be deleted"}


class TestPermissions:
    def test_replace_matrix(self, admin_client):
        role = admin_client.post("/api/v1/roles", json={"name": "auditor"}).json()
        ids = module_ids(admin_client)

        response = admin_client.put(
            f"/api/v1/roles/{role['id']}/permissions",
            json={
                "permissions": [
                    {"module_id": ids["reports"], "can_view": True},
                    {"module_id": ids["finance"], "can_view": True, "can_edit": True},
                ]
            },
        )

        assert response.status_code == 200
        permissions = {p["module_code"]: p for p in response.json()["permissions"]}
        assert set(permissions) == {"finance", "reports"}
        assert permissions["finance"]["can_edit"] is True
        assert permissions["reports"]["can_delete"] is False

    def test_changes_reach_new_sessions_only(
        self, client, sales_employee, admin_employee, db_store
    ):
        sales = rbac_service.get_role_by_name(db_store, "sales")
        staff = rbac_service.get_module_by_code(db_store, "staff")
        client.post(
            "/api/v1/auth/login", json={"username": "ana", "password": "salespass123"}
        )
        assert client.get("/api/v1/employees").status_code == 403

        # Grant staff:view behind the open session's back
        grants = [
            rbac_service.PermissionGrant(module_id=staff.id, can_view=True),
        ]
        rbac_service.set_role_permissions(db_store, sales.id, grants)
        assert client.get("/api/v1/employees").status_code == 403

        client.post(
            "/api/v1/auth/login", json={"username": "ana", "password": "salespass123"}
        )
        assert client.get("/api/v1/employees").status_code == 200


def test_toggle_module(admin_client):
    loyalty = module_ids(admin_client)["loyalty"]

    response = admin_client.put(
        f"/api/v1/modules/{loyalty}/status", json={"is_active": False}
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False
