import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import select

from tests.base import ApiTestBase

from jobportal.core.config import settings
from jobportal.core.security import verify_password
from jobportal.main import app
from jobportal.models import Banner, Category, City, Employer, Job, Staff


class ResourceListTests(ApiTestBase):
    def test_banners_second_page_newest_first(self):
        self.add_rows(*[Banner(id=i, name=f"Banner {i}", category_id=1, price=10) for i in range(1, 13)])

        response = self.client.get("/banners", params={"page": 2, "limit": 5})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Banners fetched successfully")
        data = body["data"]
        self.assertEqual((data["page"], data["limit"], data["total"], data["totalPages"]), (2, 5, 12, 3))
        self.assertEqual([row["id"] for row in data["responseData"]], [7, 6, 5, 4, 3])

    def test_list_rewrites_image_filenames(self):
        self.add_rows(
            Banner(id=1, name="With image", category_id=1, price=5, image="a.png"),
            Banner(id=2, name="Without image", category_id=1, price=5, image=""),
        )
        rows = self.client.get("/banners").json()["data"]["responseData"]
        by_id = {row["id"]: row for row in rows}
        self.assertEqual(by_id[1]["image"], "http://cdn.test/uploads/banners/a.png")
        self.assertIsNone(by_id[2]["image"])

    def test_city_filters_intersect_and_bad_int_is_ignored(self):
        self.add_rows(
            City(id=1, name="Springfield", state_id=1),
            City(id=2, name="Springfield", state_id=2),
            City(id=3, name="Shelbyville", state_id=1),
            City(id=4, name="Capital City", state_id=2),
        )
        data = self.client.get("/cities", params={"name": "field", "state_id": "1"}).json()["data"]
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["responseData"][0]["id"], 1)

        data = self.client.get("/cities", params={"state_id": "abc"}).json()["data"]
        self.assertEqual(data["total"], 4)

    def test_empty_result_and_bad_paging_fall_back(self):
        data = self.client.get("/categories", params={"page": "0", "limit": "x"}).json()["data"]
        self.assertEqual(data, {"page": 1, "limit": 10, "total": 0, "totalPages": 0, "responseData": []})

    def test_limit_is_capped(self):
        data = self.client.get("/categories", params={"limit": "5000"}).json()["data"]
        self.assertEqual(data["limit"], settings.MAX_PAGE_LIMIT)


class ResourceCrudTests(ApiTestBase):
    def test_create_then_duplicate_is_conflict(self):
        first = self.client.post("/categories", json={"name": "Tech", "description": "IT jobs"})
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["message"], "Category created successfully")
        self.assertEqual(first.json()["data"]["name"], "Tech")

        second = self.client.post("/categories", json={"name": "Tech"})
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json(), {"success": False, "message": "Category already exists"})

        data = self.client.get("/categories").json()["data"]
        self.assertEqual(data["total"], 1)

    def test_create_requires_fields(self):
        response = self.client.post("/cities", json={"name": "Nowhere"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "name and state_id are required")

        response = self.client.post("/cities", json={"name": "   ", "state_id": 3})
        self.assertEqual(response.status_code, 400)

    def test_malformed_json_body_is_rejected(self):
        response = self.client.post(
            "/categories", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_get_by_id(self):
        self.add_rows(Category(id=3, name="Finance"))
        response = self.client.get("/categories/3")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["name"], "Finance")

        self.assertEqual(self.client.get("/categories/4").status_code, 404)
        self.assertEqual(self.client.get("/categories/x1").json()["message"], "Invalid Category ID")

    def test_update_missing_row_is_not_found(self):
        response = self.client.put("/cities/7", json={"name": "Ghost", "state_id": 1})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "message": "City not found"})

    def test_update_with_identical_values_is_noop(self):
        self.add_rows(City(id=1, name="Springfield", state_id=1, status="active"))
        response = self.client.put("/cities/1", json={"name": "Springfield", "state_id": 1})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No changes made to the city")

    def test_update_changes_fields_and_keeps_absent_ones(self):
        self.add_rows(City(id=1, name="Springfield", state_id=1, status="active"))
        response = self.client.put("/cities/1", json={"name": "Springfield", "state_id": "2"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["state_id"], 2)

        with self.SessionLocal() as db:
            row = db.get(City, 1)
            self.assertEqual(row.state_id, 2)
            self.assertEqual(row.status, "active")

    def test_blanking_a_required_column_is_validation_error(self):
        self.add_rows(
            Banner(id=1, name="Summer", category_id=1, price=10),
            Job(jobID=1, job_title="Dev", posted_by="admin", employerID=1),
        )
        response = self.client.put("/banners/1", json={"name": ""})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], 'Field "name" cannot be empty')

        response = self.client.put("/jobs/1", json={"job_title": "  "})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

        with self.SessionLocal() as db:
            self.assertEqual(db.get(Banner, 1).name, "Summer")
            self.assertEqual(db.get(Job, 1).job_title, "Dev")

    def test_update_into_existing_unique_value_is_conflict(self):
        self.add_rows(Category(id=1, name="Tech"), Category(id=2, name="Sales"))
        response = self.client.put("/categories/2", json={"name": "Tech"})
        self.assertEqual(response.status_code, 409)

    def test_delete(self):
        self.add_rows(Category(id=5, name="Ops"))
        response = self.client.delete("/categories/5")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Category deleted successfully")

        self.assertEqual(self.client.delete("/categories/5").status_code, 404)
        invalid = self.client.delete("/categories/abc")
        self.assertEqual(invalid.status_code, 400)
        self.assertEqual(invalid.json()["message"], "Invalid Category ID")
        self.assertEqual(self.client.delete("/categories/0").status_code, 400)


class PasswordFieldTests(ApiTestBase):
    def test_staff_password_is_hashed_and_never_returned(self):
        response = self.client.post(
            "/staffs",
            json={"name": "Ann", "email": "ann@example.com", "mobile": "5550001", "password": "s3cret"},
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["adminID"], data["id"])
        self.assertNotIn("password", data)

        with self.SessionLocal() as db:
            row = db.get(Staff, data["adminID"])
            self.assertNotEqual(row.password, "s3cret")
            self.assertTrue(verify_password("s3cret", row.password))
            self.assertEqual(row.status, 1)

        listed = self.client.get("/staffs").json()["data"]["responseData"]
        self.assertNotIn("password", listed[0])
        self.assertNotIn("password", self.client.get(f"/staffs/{data['adminID']}").json()["data"])

    def test_staff_duplicate_mobile_is_conflict(self):
        self.client.post("/staffs", json={"name": "Ann", "email": "ann@example.com", "mobile": "5550001"})
        response = self.client.post("/staffs", json={"name": "Bob", "email": "bob@example.com", "mobile": "5550001"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "Staff already exists")

    def test_employer_same_password_is_noop_and_new_password_rehashes(self):
        created = self.client.post(
            "/employers",
            json={"name": "Acme", "username": "acme", "email": "hr@acme.test", "password": "pw-one"},
        ).json()["data"]
        employer_id = created["employerID"]

        same = self.client.put(f"/employers/{employer_id}", json={"password": "pw-one"})
        self.assertEqual(same.status_code, 400)

        changed = self.client.put(f"/employers/{employer_id}", json={"password": "pw-two"})
        self.assertEqual(changed.status_code, 200)
        with self.SessionLocal() as db:
            stored = db.execute(select(Employer.password)).scalar_one()
        self.assertTrue(verify_password("pw-two", stored))

        blank = self.client.put(f"/employers/{employer_id}", json={"password": "", "name": "Acme Ltd"})
        self.assertEqual(blank.status_code, 200)
        with self.SessionLocal() as db:
            self.assertEqual(db.execute(select(Employer.password)).scalar_one(), stored)


class UploadTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self._upload_dir = patch.object(settings, "UPLOAD_DIR", self._tmp.name)
        self._upload_dir.start()

    def tearDown(self):
        self._upload_dir.stop()
        self._tmp.cleanup()
        super().tearDown()

    def test_multipart_create_stores_file_and_update_keeps_it(self):
        response = self.client.post(
            "/banners",
            data={"category_id": "1", "name": "Summer", "price": "9.99"},
            files={"image": ("summer.PNG", b"\x89PNG-fake-bytes", "image/png")},
        )
        self.assertEqual(response.status_code, 200)
        banner_id = response.json()["data"]["id"]

        with self.SessionLocal() as db:
            stored = db.get(Banner, banner_id).image
        self.assertRegex(stored, r"^[0-9a-f]{32}\.png$")
        self.assertTrue((Path(self._tmp.name) / "banners" / stored).is_file())

        record = self.client.get(f"/banners/{banner_id}").json()["data"]
        self.assertEqual(record["image"], f"http://cdn.test/uploads/banners/{stored}")

        updated = self.client.put(f"/banners/{banner_id}", data={"name": "Summer Sale"})
        self.assertEqual(updated.status_code, 200)
        with self.SessionLocal() as db:
            row = db.get(Banner, banner_id)
            self.assertEqual(row.name, "Summer Sale")
            self.assertEqual(row.image, stored)

    def test_unsupported_extension_is_rejected(self):
        response = self.client.post(
            "/banners",
            data={"category_id": "1", "name": "Bad", "price": "1"},
            files={"image": ("payload.exe", b"MZ", "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Unsupported file type: .exe")
        self.assertEqual(self.client.get("/banners").json()["data"]["total"], 0)

    def test_replacing_image_removes_previous_file(self):
        created = self.client.post(
            "/banners",
            data={"category_id": "1", "name": "Winter", "price": "5"},
            files={"image": ("old.png", b"old-bytes", "image/png")},
        )
        banner_id = created.json()["data"]["id"]
        with self.SessionLocal() as db:
            old_name = db.get(Banner, banner_id).image

        updated = self.client.put(
            f"/banners/{banner_id}",
            files={"image": ("new.webp", b"new-bytes", "image/webp")},
        )
        self.assertEqual(updated.status_code, 200)
        with self.SessionLocal() as db:
            new_name = db.get(Banner, banner_id).image

        folder = Path(self._tmp.name) / "banners"
        self.assertNotEqual(new_name, old_name)
        self.assertFalse((folder / old_name).exists())
        self.assertTrue((folder / new_name).is_file())

    def test_failed_create_removes_stored_file(self):
        self.add_rows(Banner(id=1, name="Taken", category_id=1, price=1))
        response = self.client.post(
            "/banners",
            data={"category_id": "1", "name": "Taken", "price": "1"},
            files={"image": ("dup.jpg", b"jpeg-bytes", "image/jpeg")},
        )
        self.assertEqual(response.status_code, 409)
        folder = Path(self._tmp.name) / "banners"
        self.assertEqual(list(folder.iterdir()) if folder.exists() else [], [])


class ErrorEnvelopeTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.client.close()
        self.client = TestClient(app, raise_server_exceptions=False)

    def test_unexpected_error_is_wrapped(self):
        with patch("jobportal.api.resources.list_records", side_effect=RuntimeError("db exploded")):
            response = self.client.get("/banners")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"success": False, "message": "Internal Server Error", "error": "db exploded"},
        )

    def test_error_detail_hidden_in_production(self):
        with patch.object(settings, "APP_ENV", "production"), patch(
            "jobportal.api.resources.list_records", side_effect=RuntimeError("db exploded")
        ):
            response = self.client.get("/banners")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "message": "Internal Server Error"})


if __name__ == "__main__":
    unittest.main()
