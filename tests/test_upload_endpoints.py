"""
Upload Endpoint Tests
=====================
POST /upload-file, /upload-folder and /bug through FastAPI's TestClient.
The orchestrator is wired to in-memory collaborators (see conftest.py).
"""
from unittest.mock import AsyncMock

import pytest

from bugtracker.scanner.classifier import Classification

TWO_BUGS = b"let x = undefined variable;\nwhile(true){}"
THREE_BUGS = b"SyntaxError here\nfoo is deprecated\nconst y = 1 / 0; // divide by zero"


# ===================================================================
# POST /upload-file
# ===================================================================
def test_upload_file_reports_bugs(client, findings_store):
    resp = client.post("/upload-file", files={"file": ("app.js", TWO_BUGS, "application/javascript")})

    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "File uploaded successfully!"
    assert data["bugFound"] is True
    assert data["fileUrl"] == "https://storage.test/bug/files/1700000000000_app.js"
    assert [b["line_number"] for b in data["detectedBugs"]] == [1, 2]
    assert data["detectedBugs"][0]["bug_type"] == "Reference Error"
    assert data["detectedBugs"][0]["suggested_fix"] == "Ensure variables and functions are defined before use."
    assert len(findings_store.inserts) == 1


def test_upload_file_clean(client, findings_store):
    resp = client.post("/upload-file", files={"file": ("ok.js", b"const a = 1;\n", "text/plain")})
    assert resp.status_code == 200
    assert resp.json()["bugFound"] is False
    assert resp.json()["detectedBugs"] == []
    assert findings_store.inserts == []


@pytest.mark.parametrize("route, message", [
    ("/upload-file", "No file uploaded"),
    ("/upload-folder", "No folder uploaded"),
    ("/bug", "No file uploaded"),
])
def test_missing_file_returns_400_without_side_effects(client, blob_store, findings_store, classifier, route, message):
    resp = client.post(route)
    assert resp.status_code == 400
    assert resp.json() == {"error": message}
    assert blob_store.uploads == []
    assert findings_store.inserts == []
    assert classifier.calls == []


@pytest.mark.parametrize("route, field, message", [
    ("/upload-file", "file", "No file uploaded"),
    ("/upload-folder", "files", "No folder uploaded"),
    ("/bug", "file", "No file uploaded"),
])
def test_empty_unnamed_part_returns_400(client, blob_store, findings_store, classifier, route, field, message):
    resp = client.post(route, files={field: ("", b"", "application/octet-stream")})
    assert resp.status_code == 400
    assert resp.json() == {"error": message}
    assert blob_store.uploads == []
    assert findings_store.inserts == []
    assert classifier.calls == []


def test_upload_folder_ignores_unnamed_parts(client, blob_store):
    resp = client.post("/upload-folder", files=[
        ("files", ("", b"", "application/octet-stream")),
        ("files", ("a.js", b"const a = 1;\n", "text/plain")),
    ])
    assert resp.status_code == 200
    assert resp.json()["filesUploaded"] == 1
    assert [u[1] for u in blob_store.uploads] == ["folders/1700000000000_a.js"]


def test_upload_file_storage_failure_returns_500(client, blob_store):
    blob_store.fail_upload = "Bucket not found"
    resp = client.post("/upload-file", files={"file": ("app.js", TWO_BUGS, "text/plain")})
    assert resp.status_code == 500
    assert resp.json() == {"error": "File upload failed: Bucket not found"}


def test_upload_file_insert_failure_returns_500(client, findings_store):
    findings_store.fail = "relation \"bug\" does not exist"
    resp = client.post("/upload-file", files={"file": ("app.js", TWO_BUGS, "text/plain")})
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Database insert failed:")


def test_unexpected_exception_returns_500(client, orchestrator):
    orchestrator.upload_file = AsyncMock(side_effect=RuntimeError("boom"))
    resp = client.post("/upload-file", files={"file": ("app.js", TWO_BUGS, "text/plain")})
    assert resp.status_code == 500
    assert resp.json() == {"error": "boom"}


# ===================================================================
# POST /upload-folder
# ===================================================================
def test_upload_folder_aggregates(client, findings_store):
    resp = client.post("/upload-folder", files=[
        ("files", ("a.js", TWO_BUGS, "text/plain")),
        ("files", ("b.js", THREE_BUGS, "text/plain")),
    ])

    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Folder uploaded successfully!"
    assert data["filesUploaded"] == 2
    assert data["bugsDetected"] == 5
    assert data["uploadedFiles"] == [
        {"fileName": "folders/1700000000000_a.js",
         "fileUrl": "https://storage.test/bugfolders/folders/1700000000000_a.js"},
        {"fileName": "folders/1700000000000_b.js",
         "fileUrl": "https://storage.test/bugfolders/folders/1700000000000_b.js"},
    ]
    assert [b["file_name"] for b in data["detectedBugs"]] == ["a.js"] * 2 + ["b.js"] * 3
    assert len(findings_store.inserts) == 1


# ===================================================================
# POST /bug
# ===================================================================
def test_bug_endpoint_returns_ai_analysis(client, findings_store):
    resp = client.post("/bug", files={"file": ("main.py", b"print(1)\n", "text/x-python")})
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "File uploaded successfully"
    assert data["aiAnalysis"] == [{"label": "LABEL_1", "score": 0.87}]
    assert data["fileUrl"] == "https://storage.test/bug/bug/1700000000000_main.py"
    assert findings_store.inserts[0][1][0].confidence == 0.87


def test_bug_endpoint_classifier_failure_still_200(client, classifier, findings_store):
    classifier.result = Classification(error="Failed to analyze code")
    resp = client.post("/bug", files={"file": ("main.py", b"print(1)\n", "text/x-python")})
    assert resp.status_code == 200
    assert resp.json()["aiAnalysis"] == {"error": "Failed to analyze code"}
    assert findings_store.inserts == []


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
