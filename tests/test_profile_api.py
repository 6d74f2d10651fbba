from tests.support import ApiTestCase


class ProfileApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_user("user@example.com")
        self.user = self.login("user@example.com")

    def test_set_and_list_preferences(self):
        self.client.put("/api/profile/preferences/theme", json={"value": "dark"}, headers=self.user)
        updated = self.client.put(
            "/api/profile/preferences/theme", json={"value": {"mode": "light"}}, headers=self.user
        )

        self.assertEqual(updated.status_code, 200)
        prefs = self.client.get("/api/profile/preferences", headers=self.user).json()
        self.assertEqual(
            [(p["preference_key"], p["preference_value"]) for p in prefs],
            [("theme", {"mode": "light"})],
        )

    def test_preferences_are_private(self):
        self.client.put("/api/profile/preferences/theme", json={"value": "dark"}, headers=self.user)
        self.create_user("other@example.com")

        prefs = self.client.get("/api/profile/preferences", headers=self.login("other@example.com")).json()

        self.assertEqual(prefs, [])
