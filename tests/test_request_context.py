import logging
import unittest

from tests.base import ApiTestBase

from jobportal.core.request_context import RequestIdFilter, client_request_id, current_request_id, response_policy


class RequestIdTests(unittest.TestCase):
    def test_client_request_id_accepts_short_tokens_only(self):
        self.assertEqual(client_request_id(" admin-ui_2026.10.18 "), "admin-ui_2026.10.18")
        self.assertIsNone(client_request_id(None))
        self.assertIsNone(client_request_id("has spaces"))
        self.assertIsNone(client_request_id("x" * 65))
        self.assertIsNone(client_request_id("naïve"))

    def test_filter_stamps_records_outside_a_request(self):
        record = logging.LogRecord("jobportal.crud", logging.INFO, __file__, 1, "msg", None, None)
        self.assertTrue(RequestIdFilter().filter(record))
        self.assertEqual(record.request_id, "-")
        self.assertEqual(current_request_id(), "-")

    def test_uploads_are_cacheable_and_embeddable(self):
        policy = response_policy("/uploads/banners/a.png")
        self.assertEqual(policy["Cross-Origin-Resource-Policy"], "cross-origin")
        self.assertTrue(policy["Cache-Control"].startswith("public, max-age="))
        self.assertNotIn("X-Frame-Options", policy)

    def test_api_responses_are_not_cached(self):
        policy = response_policy("/banners")
        self.assertEqual(policy["Cache-Control"], "no-store")
        self.assertEqual(policy["Cross-Origin-Resource-Policy"], "same-origin")
        self.assertEqual(policy["X-Frame-Options"], "DENY")


class RequestContextMiddlewareTests(ApiTestBase):
    def test_health_carries_generated_request_id(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "database": "connected"})
        self.assertRegex(response.headers["x-request-id"], r"^[0-9a-f]{32}$")
        self.assertEqual(response.headers["cache-control"], "no-store")

    def test_caller_request_id_is_echoed_or_replaced(self):
        kept = self.client.get("/categories", headers={"X-Request-ID": "admin-ui-42"})
        self.assertEqual(kept.headers["x-request-id"], "admin-ui-42")

        replaced = self.client.get("/categories", headers={"X-Request-ID": "bad id"})
        self.assertRegex(replaced.headers["x-request-id"], r"^[0-9a-f]{32}$")

    def test_error_responses_keep_policy_headers(self):
        response = self.client.get("/categories/999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.headers["x-content-type-options"], "nosniff")
        self.assertTrue(response.headers["x-request-id"])

    def test_access_line_is_logged(self):
        with self.assertLogs("jobportal.access", level="INFO") as captured:
            self.client.get("/categories", params={"page": 1})
        self.assertTrue(any("GET /categories -> 200" in line for line in captured.output))


if __name__ == "__main__":
    unittest.main()
