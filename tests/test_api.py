"""HTTP level tests: auth, envelopes and error mapping"""
ADMIN_PASSWORD = "s3cret-admin"


class TestPublicRoutes:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_login(self, client):
        response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["data"]["token"] == ADMIN_PASSWORD

    def test_login_wrong_password(self, client):
        response = client.post("/api/auth/login", json={"password": "guess"})

        assert response.status_code == 401
        body = response.json()
        assert body["status"] == "error"
        assert body["message"] == "Invalid password"
        assert body["error"]["type"] == "AuthorizationError"


class TestAuthGuard:
    def test_missing_token(self, client):
        response = client.get("/api/blocked")
        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_wrong_token(self, client):
        response = client.get("/api/blocked", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_missing_admin_password_refuses_everyone(self, client, settings, auth_headers):
        settings.admin_password = ""
        response = client.get("/api/blocked", headers=auth_headers)
        assert response.status_code == 500


class TestBlockedRoutes:
    def test_block_and_unblock(self, client, appliance, auth_headers):
        response = client.post("/api/blocked/192.168.1.50/block", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Device blocked successfully"
        assert body["data"]["kind"] == "ip"
        assert appliance.alias("BLOCKED").members == ["192.168.1.50"]

        listed = client.get("/api/blocked", headers=auth_headers).json()["data"]
        assert [item["value"] for item in listed] == ["192.168.1.50"]
        assert listed[0]["hostname"] == "laptop"

        response = client.post("/api/blocked/192.168.1.50/unblock", headers=auth_headers)
        assert response.json()["message"] == "Device unblocked successfully"
        assert appliance.apply_calls == ["firewall", "firewall"]

    def test_block_by_hostname(self, client, appliance, auth_headers):
        response = client.post("/api/blocked/phone.local/block", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["blockable_value"] == "192.168.1.51"

    def test_unknown_hostname_is_404(self, client, auth_headers):
        response = client.post("/api/blocked/ghost/block", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "HostnameUnresolved"

    def test_unknown_alias_is_404(self, client, auth_headers):
        response = client.post("/api/blocked/NOPE/block", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "AliasNotFound"

    def test_apply_failure_is_502(self, client, appliance, auth_headers):
        appliance.fail_apply = True

        response = client.post("/api/blocked/192.168.1.50/block", headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "ApplyFailed"

    def test_unreachable_appliance_is_502(self, client, appliance, auth_headers):
        appliance.fail_reads = True

        response = client.get("/api/blocked", headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "UpstreamUnavailable"


class TestGroupRoutes:
    def test_membership(self, client, appliance, auth_headers):
        appliance.add_alias("KIDS", ["192.168.1.80"])
        appliance.add_alias("IOT")

        response = client.put(
            "/api/groups/membership/192.168.1.80", json={"groups": ["IOT"]}, headers=auth_headers
        )

        assert response.status_code == 200
        actions = {c["group"]: c["action"] for c in response.json()["data"]}
        assert actions == {"BLOCKED": "skipped", "KIDS": "removed", "IOT": "added"}

    def test_create_group(self, client, appliance, auth_headers):
        response = client.post(
            "/api/groups", json={"name": "GUESTS", "addresses": ["10.0.0.1"]}, headers=auth_headers
        )

        assert response.status_code == 201
        assert appliance.alias("GUESTS").members == ["10.0.0.1"]

    def test_duplicate_group_is_409(self, client, auth_headers):
        response = client.post("/api/groups", json={"name": "BLOCKED"}, headers=auth_headers)
        assert response.status_code == 409

    def test_status_of_unknown_group(self, client, auth_headers):
        response = client.get("/api/groups/NOPE/status", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "unknown"
        assert data["total_member_count"] == 0


class TestMiscRoutes:
    def test_validate_ip(self, client, auth_headers):
        ok = client.post("/api/dhcp/validate-ip", json={"ip": "192.168.1.30"}, headers=auth_headers)
        bad = client.post("/api/dhcp/validate-ip", json={"ip": "192.168.1.1"}, headers=auth_headers)

        assert ok.json()["data"] == {"valid": True, "error": None}
        assert bad.json()["data"]["valid"] is False

    def test_apply_unknown_service_is_400(self, client, auth_headers):
        response = client.post("/api/pending/apply/nat", headers=auth_headers)
        assert response.status_code == 400

    def test_overview(self, client, auth_headers):
        response = client.get("/api/stats/overview", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["total_connected"] == 2

    def test_validate_ip_with_leading_zeros(self, client, auth_headers):
        response = client.post("/api/dhcp/validate-ip", json={"ip": "192.168.001.20"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"valid": False, "error": "Invalid IP address format"}

    def test_static_mapping_with_leading_zeros_is_400(self, client, auth_headers):
        response = client.post(
            "/api/dhcp/static", json={"mac": "aa:bb:cc:00:00:11", "ip": "192.168.1.010"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_blocklist_alias_cannot_be_edited_as_group(self, client, appliance, auth_headers):
        response = client.put("/api/groups/BLOCKED", json={"addresses": ["10.0.0.1"]}, headers=auth_headers)

        assert response.status_code == 400
        assert appliance.alias("BLOCKED").members == []

    def test_block_mixed_case_group(self, client, appliance, auth_headers):
        appliance.add_alias("Kids_Devices", ["192.168.1.60"])

        response = client.post("/api/groups/Kids_Devices/block", headers=auth_headers)

        assert response.status_code == 200
        assert appliance.alias("BLOCKED").members == ["Kids_Devices"]
