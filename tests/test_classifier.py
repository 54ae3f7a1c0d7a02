"""
Classifier Client Tests
=======================
Remote endpoint replaced by httpx.MockTransport — no network.
"""
import asyncio
import json

import httpx

from bugtracker.scanner.classifier import Classification, ClassifierClient, normalize_response

URL = "https://classifier.test/models/code"


def _classify(handler, text="print('hi')", api_key="hf_test", url=URL):
    async def run():
        client = ClassifierClient(url, api_key, transport=httpx.MockTransport(handler))
        try:
            return await client.classify(text)
        finally:
            await client.close()

    return asyncio.run(run())


# ===================================================================
# normalize_response
# ===================================================================
class TestNormalizeResponse:

    def test_first_element_used(self):
        result = normalize_response([
            {"label": "BUGGY", "score": 0.4},
            {"label": "CLEAN", "score": 0.9},
        ])
        assert result.label == "BUGGY"
        assert result.confidence == 0.4
        assert not result.failed

    def test_empty_list_defaults(self):
        result = normalize_response([])
        assert result.label == "No issues detected"
        assert result.confidence == 0

    def test_missing_fields_default(self):
        result = normalize_response([{}])
        assert result.label == "No issues detected"
        assert result.confidence == 0

    def test_non_list_body_defaults(self):
        result = normalize_response({"generated_text": "..."})
        assert result.label == "No issues detected"
        assert result.confidence == 0
        assert result.raw == {"generated_text": "..."}

    def test_non_numeric_score(self):
        assert normalize_response([{"label": "X", "score": "high"}]).confidence == 0


# ===================================================================
# ClassifierClient.classify
# ===================================================================
class TestClassify:

    def test_success_sends_inputs_and_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[{"label": "LABEL_1", "score": 0.87}])

        result = _classify(handler, text="let a;")
        assert seen["auth"] == "Bearer hf_test"
        assert seen["body"] == {"inputs": "let a;"}
        assert result.label == "LABEL_1"
        assert result.confidence == 0.87
        assert result.as_payload() == [{"label": "LABEL_1", "score": 0.87}]

    def test_empty_success_response_defaults(self):
        result = _classify(lambda request: httpx.Response(200, json=[]))
        assert not result.failed
        assert (result.label, result.confidence) == ("No issues detected", 0)

    def test_transport_failure_returns_marker(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = _classify(handler)
        assert result.failed
        assert result.as_payload() == {"error": "Failed to analyze code"}

    def test_non_success_status_returns_marker(self):
        result = _classify(lambda request: httpx.Response(503, json={"error": "loading"}))
        assert result.failed
        assert result.error == "Failed to analyze code"

    def test_malformed_body_returns_marker(self):
        result = _classify(lambda request: httpx.Response(200, text="<html>oops</html>"))
        assert result.failed

    def test_invalid_url_returns_marker(self):
        result = _classify(lambda request: httpx.Response(200, json=[]), url="https://classifier.test/\x00models")
        assert result.failed
        assert result.error == "Failed to analyze code"

    def test_failed_classification_defaults(self):
        marker = Classification(error="Failed to analyze code")
        assert marker.label == "No issues detected"
        assert marker.confidence == 0
