"""
Vision collaborator client.

Talks to the external image-analysis and report-extraction functions. These
sit outside the scoring core: whatever happens here (unreachable service,
rate limiting, exhausted credits, malformed JSON) the caller receives ``None``
and scoring proceeds without the value.

No retries, one request per call.
"""
from typing import Any, Dict, Optional

import httpx

from postop_risk import config
from postop_risk.core.assessment import MediaAnalysis
from postop_risk.core.intake import ExtractedReport, parse_extracted_report, parse_media_analysis
from postop_risk.utils import MediaAnalysisError, ReportExtractionError, get_logger

logger = get_logger(__name__)

ANALYZE_PATH = "/analyze-eye-image"
EXTRACT_PATH = "/extract-report-data"

_STATUS_MESSAGES = {
    402: "AI credits exhausted",
    429: "Rate limit exceeded",
}


class VisionServiceClient:
    """
    Async client for the vision collaborator.

    Pass ``transport`` to route requests somewhere other than the network
    (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else config.VISION_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else config.VISION_API_KEY
        self.timeout = timeout if timeout is not None else config.VISION_TIMEOUT_SECONDS
        self._transport = transport

        if not self.base_url:
            logger.warning("VISION_API_URL is not set. Image analysis and report extraction are disabled.")

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _post(self, path: str, body: Dict[str, Any], error_cls) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=body, headers=self._headers())
        except httpx.HTTPError as exc:
            raise error_cls(f"Request to {path} failed: {exc}") from exc

        if response.status_code != 200:
            message = _STATUS_MESSAGES.get(response.status_code, f"{path} returned HTTP {response.status_code}")
            raise error_cls(message, status_code=response.status_code, details={"body": response.text[:200]})

        try:
            data = response.json()
        except ValueError as exc:
            raise error_cls(f"{path} returned malformed JSON", status_code=response.status_code) from exc

        if not isinstance(data, dict):
            raise error_cls(f"{path} returned a non-object JSON payload", status_code=response.status_code)
        if data.get("error"):
            raise error_cls(str(data["error"]), status_code=response.status_code)
        return data

    async def analyze_eye_image(self, image_base64: str) -> Optional[MediaAnalysis]:
        """Analyse an eye photograph. ``None`` on any failure."""
        if not self.enabled or not image_base64:
            return None
        try:
            data = await self._post(ANALYZE_PATH, {"imageBase64": image_base64}, MediaAnalysisError)
        except MediaAnalysisError as exc:
            logger.warning(f"Image analysis unavailable, continuing without media: {exc.message}")
            return None
        return parse_media_analysis(data)

    async def extract_report(self, file_base64: str, file_type: str = "image") -> Optional[ExtractedReport]:
        """Extract assessment fields from a report image or PDF. ``None`` on any failure."""
        if not self.enabled or not file_base64:
            return None
        try:
            data = await self._post(
                EXTRACT_PATH,
                {"fileBase64": file_base64, "fileType": file_type},
                ReportExtractionError,
            )
        except ReportExtractionError as exc:
            logger.warning(f"Report extraction unavailable: {exc.message}")
            return None
        report = parse_extracted_report(data)
        logger.info(f"Report extracted with {report.confidence}% confidence")
        return report
