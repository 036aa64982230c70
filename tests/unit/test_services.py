"""
Unit Tests for the Vision Collaborator Client

External failures must turn into "no value", never into an exception.
Requests are served by httpx.MockTransport.
"""
import json

import httpx
import pytest

from postop_risk.services import VisionServiceClient


def _client(handler) -> VisionServiceClient:
    return VisionServiceClient(
        base_url="http://vision.test/functions",
        api_key="test-key",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


MEDIA_RESPONSE = {
    "rednessScore": 64,
    "edemaScore": 35,
    "dischargePatternScore": 20,
    "overallMediaRisk": 58,
    "abnormalCues": ["Periorbital edema identified"],
    "urgencyLevel": "important",
}


class TestImageAnalysis:

    async def test_successful_analysis(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=MEDIA_RESPONSE)

        media = await _client(handler).analyze_eye_image("aGVsbG8=")

        assert media.overall_media_risk == 58
        assert media.abnormal_cues == ["Periorbital edema identified"]
        assert seen["path"] == "/functions/analyze-eye-image"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"] == {"imageBase64": "aGVsbG8="}

    @pytest.mark.parametrize("status", [402, 429, 500])
    async def test_http_errors_mean_no_media(self, status):
        client = _client(lambda request: httpx.Response(status, json={"error": "nope"}))
        assert await client.analyze_eye_image("aGVsbG8=") is None

    async def test_error_payload_means_no_media(self):
        client = _client(lambda request: httpx.Response(200, json={"error": "No image provided"}))
        assert await client.analyze_eye_image("aGVsbG8=") is None

    async def test_malformed_json_means_no_media(self):
        client = _client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        assert await client.analyze_eye_image("aGVsbG8=") is None

    async def test_transport_failure_means_no_media(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert await _client(handler).analyze_eye_image("aGVsbG8=") is None

    async def test_disabled_without_base_url(self):
        client = VisionServiceClient(base_url="", api_key="")
        assert client.enabled is False
        assert await client.analyze_eye_image("aGVsbG8=") is None
        assert await client.extract_report("aGVsbG8=") is None


class TestReportExtraction:

    async def test_successful_extraction(self):
        def handler(request):
            body = json.loads(request.content)
            assert body == {"fileBase64": "cGRm", "fileType": "pdf"}
            return httpx.Response(200, json={
                "demographics": {"age": 72},
                "extractionConfidence": 64,
                "extractionNotes": "Age only.",
            })

        report = await _client(handler).extract_report("cGRm", "pdf")
        assert report.confidence == 64
        assert report.assessment.demographics.age == 72

    async def test_rate_limited_extraction(self):
        client = _client(lambda request: httpx.Response(429, text="slow down"))
        assert await client.extract_report("cGRm") is None
