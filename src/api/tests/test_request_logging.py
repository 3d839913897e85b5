"""Tests for the request id / access log middleware."""

import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.main import app
from api.middleware.request_logging import REQUEST_ID_HEADER, log_requests


class TestRequestLogging(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_response_carries_generated_request_id(self):
        with self.assertLogs('api.access', level='INFO') as logs:
            response = self.client.get("/")

        assert response.status_code == 200
        request_id = response.headers[REQUEST_ID_HEADER]
        assert request_id

        record = logs.records[-1]
        assert record.getMessage() == "Request completed"
        assert record.requestId == request_id
        assert record.method == "GET"
        assert record.path == "/"
        assert record.status == 200
        assert record.durationMs >= 0

    def test_incoming_request_id_is_reused(self):
        with self.assertLogs('api.access', level='INFO') as logs:
            response = self.client.get("/", headers={REQUEST_ID_HEADER: "req-123"})

        assert response.headers[REQUEST_ID_HEADER] == "req-123"
        assert logs.records[-1].requestId == "req-123"

    def test_each_request_gets_its_own_id(self):
        first = self.client.get("/").headers[REQUEST_ID_HEADER]
        second = self.client.get("/").headers[REQUEST_ID_HEADER]
        assert first != second

    def test_unhandled_error_is_logged_and_reraised(self):
        failing = FastAPI()
        failing.middleware("http")(log_requests)

        @failing.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        client = TestClient(failing, raise_server_exceptions=False)
        with self.assertLogs('api.access', level='ERROR') as logs:
            response = client.get("/boom", headers={REQUEST_ID_HEADER: "req-err"})

        assert response.status_code == 500
        assert logs.records[-1].getMessage() == "Request failed"
        assert logs.records[-1].requestId == "req-err"
