from tests.support import ApiTestCase


class WhitelistApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.register_admin()

    def test_add_list_and_remove(self):
        email = self.client.post(
            "/api/whitelist", json={"value": "Friend@Example.com"}, headers=self.admin
        )
        domain = self.client.post(
            "/api/whitelist", json={"value": "example.org", "entry_type": "domain"}, headers=self.admin
        )
        self.assertEqual(email.status_code, 201)
        self.assertEqual(email.json()["email"], "friend@example.com")
        self.assertEqual(domain.json()["domain"], "example.org")

        entries = self.client.get("/api/whitelist", headers=self.admin).json()["entries"]
        self.assertEqual(len(entries), 2)

        removed = self.client.delete(f"/api/whitelist/{email.json()['entry_id']}", headers=self.admin)
        self.assertEqual(removed.status_code, 200)
        self.assertEqual(len(self.client.get("/api/whitelist", headers=self.admin).json()["entries"]), 1)

    def test_validation_and_duplicates(self):
        bad = self.client.post(
            "/api/whitelist", json={"value": "example.com", "entry_type": "email"}, headers=self.admin
        )
        self.client.post("/api/whitelist", json={"value": "example.com"}, headers=self.admin)
        dup = self.client.post("/api/whitelist", json={"value": "EXAMPLE.com"}, headers=self.admin)

        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.json()["detail"], "Please enter a valid email address.")
        self.assertEqual(dup.status_code, 409)
        self.assertEqual(dup.json()["detail"], "Domain is already on the whitelist.")

    def test_check_endpoint(self):
        self.client.post("/api/whitelist", json={"value": "example.org"}, headers=self.admin)

        yes = self.client.get("/api/whitelist/check", params={"email": "A@Sub.Example.org"}, headers=self.admin)
        no = self.client.get("/api/whitelist/check", params={"email": "a@example.com"}, headers=self.admin)

        self.assertEqual(yes.json(), {"email": "a@sub.example.org", "is_whitelisted": True})
        self.assertFalse(no.json()["is_whitelisted"])

    def test_remove_missing_is_404(self):
        response = self.client.delete("/api/whitelist/unknown", headers=self.admin)

        self.assertEqual(response.status_code, 404)

    def test_whitelisting_enables_registration(self):
        refused = self.client.post(
            "/api/auth/register", json={"email": "late@example.net", "password": "long-enough-pw"}
        )
        self.client.post("/api/whitelist", json={"value": "late@example.net"}, headers=self.admin)
        accepted = self.client.post(
            "/api/auth/register", json={"email": "late@example.net", "password": "long-enough-pw"}
        )

        self.assertEqual(refused.status_code, 403)
        self.assertEqual(accepted.status_code, 201)
