import unittest

from chalkboard.main import app

from support import make_client


class TestHistory(unittest.TestCase):

    def setUp(self):
        self.client = make_client()

    def tearDown(self):
        app.dependency_overrides.clear()

    def save(self, user_id=1, status="Solved", subject="Mathematics", question="Solve x + 1 = 2"):
        response = self.client.post("/history", json={
            "userId": user_id,
            "questionData": {"questionText": question},
            "canvasData": {"strokes": []},
            "status": status,
            "subject": subject,
        })
        self.assertEqual(response.status_code, 201)
        return response.json()["data"]

    def test_save_lowercases_status(self):
        entry = self.save(status="Solved")
        self.assertEqual(entry["status"], "solved")
        self.assertEqual(entry["userId"], 1)
        self.assertEqual(entry["questionData"], {"questionText": "Solve x + 1 = 2"})
        self.assertIn("createdAt", entry)
        self.assertIn("updatedAt", entry)

    def test_save_requires_user(self):
        response = self.client.post("/history", json={"questionData": {}, "status": "solved"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "message": "User ID is required."})

    def test_update_merges_given_fields(self):
        entry = self.save(status="attempted")

        response = self.client.put(f"/history/{entry['id']}", json={"status": "Solved"})

        self.assertEqual(response.status_code, 200)
        updated = response.json()["data"]
        self.assertEqual(updated["status"], "solved")
        self.assertEqual(updated["canvasData"], {"strokes": []})

        canvas = {"strokes": [{"points": [[1, 2]]}]}
        response = self.client.put(f"/history/{entry['id']}", json={"canvasData": canvas})
        self.assertEqual(response.json()["data"]["canvasData"], canvas)
        self.assertEqual(response.json()["data"]["status"], "solved")

    def test_update_unknown_entry_is_bad_request(self):
        response = self.client.put("/history/999", json={"status": "solved"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "message": "History item not found."})

    def test_get_detail(self):
        entry = self.save()
        response = self.client.get(f"/history/{entry['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["id"], entry["id"])

        response = self.client.get("/history/999")
        self.assertEqual(response.status_code, 400)

    def test_list_newest_first_with_pagination(self):
        first = self.save(question="first")
        second = self.save(question="second")
        third = self.save(question="third")
        self.save(user_id=2)

        response = self.client.get("/history", params={"userId": 1, "page": 1, "limit": 2})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual([item["id"] for item in body["data"]], [third["id"], second["id"]])
        self.assertEqual(body["pagination"], {"page": 1, "limit": 2, "total": 3, "totalPages": 2})

        response = self.client.get("/history", params={"userId": 1, "page": 2, "limit": 2})
        self.assertEqual([item["id"] for item in response.json()["data"]], [first["id"]])

    def test_list_filters(self):
        self.save(status="solved", subject="Mathematics")
        self.save(status="attempted", subject="Mathematics")
        self.save(status="solved", subject="Physics")

        all_items = self.client.get("/history", params={"userId": 1, "status": "All"}).json()
        self.assertEqual(all_items["pagination"]["total"], 3)

        solved = self.client.get("/history", params={"userId": 1, "status": "SOLVED"}).json()
        self.assertEqual(solved["pagination"]["total"], 2)
        self.assertTrue(all(item["status"] == "solved" for item in solved["data"]))

        physics = self.client.get("/history", params={"userId": 1, "status": "solved", "subject": "Physics"}).json()
        self.assertEqual(physics["pagination"]["total"], 1)
        self.assertEqual(physics["data"][0]["subject"], "Physics")

    def test_list_defaults_and_requires_user(self):
        self.save()
        body = self.client.get("/history", params={"userId": 1}).json()
        self.assertEqual(body["pagination"], {"page": 1, "limit": 30, "total": 1, "totalPages": 1})

        response = self.client.get("/history")
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
