"""Tests for the HTTP API."""

import os

import pytest
from fastapi.testclient import TestClient

from mermaid_viewer.api.main import app, limiter
from mermaid_viewer.api.models.config import APIConfig
from mermaid_viewer.api.services.file_manager import FileManager


MARKDOWN = (
    "# Overview\n"
    "```mermaid\ngraph TD\nA-->B\n```\n"
    "\n"
    "## Sequence\n"
    "```mermaid\nsequenceDiagram\nA->>B: hi\n```\n"
)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    directory = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
def client(upload_dir):
    return TestClient(app)


def upload(client, name, content):
    return client.post(
        "/api/files/upload",
        files=[("files", (name, content.encode("utf-8"), "text/plain"))]
    )


def uploaded_id(client, name="doc.md", content=MARKDOWN):
    response = upload(client, name, content)
    assert response.status_code == 200
    return response.json()["files"][0]["id"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["environment"] == "development"
    assert data["uptime"] >= 0


def test_root(client):
    data = client.get("/").json()

    assert data["docs"] == "/api/docs"
    assert data["health"] == "/api/health"


def test_security_headers(client):
    response = client.get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "HTTP_ERROR"


def test_upload_and_list(client, upload_dir):
    response = upload(client, "doc.md", MARKDOWN)

    assert response.status_code == 200
    stored = response.json()["files"][0]
    assert stored["name"] == "doc.md"
    assert stored["id"].endswith("_doc.md")
    assert stored["type"] == "markdown"
    assert (upload_dir / stored["id"]).read_text() == MARKDOWN

    listed = client.get("/api/files").json()
    assert [f["id"] for f in listed] == [stored["id"]]
    assert listed[0]["name"] == "doc.md"


def test_upload_rejects_unsupported_extension(client, upload_dir):
    response = upload(client, "notes.txt", "hello")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILE_FORMAT"
    assert list(upload_dir.iterdir()) == []


def test_upload_without_files(client):
    response = client.post("/api/files/upload")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NO_FILES"


def test_upload_too_large(client, monkeypatch):
    monkeypatch.setenv("MAX_FILE_SIZE_MB", "0")

    response = upload(client, "doc.md", MARKDOWN)

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "FILE_TOO_LARGE"


def test_upload_too_many_files(client, monkeypatch):
    monkeypatch.setenv("MAX_FILES_PER_UPLOAD", "1")

    response = client.post(
        "/api/files/upload",
        files=[
            ("files", ("a.md", b"# A", "text/plain")),
            ("files", ("b.md", b"# B", "text/plain")),
        ]
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TOO_MANY_FILES"


def test_list_file_diagrams(client):
    file_id = uploaded_id(client)

    response = client.get(f"/api/files/{file_id}/diagrams")

    assert response.status_code == 200
    data = response.json()
    assert data["fileId"] == file_id
    assert data["totalDiagrams"] == 2
    assert [d["title"] for d in data["diagrams"]] == ["Overview", "Sequence"]
    assert data["diagrams"][0]["startLine"] == 1
    assert data["diagrams"][0]["endLine"] == 4
    assert data["diagrams"][1]["rawBlock"].startswith("```mermaid")


def test_diagram_navigation(client):
    file_id = uploaded_id(client)

    first = client.get(f"/api/files/{file_id}/diagrams/0").json()
    last = client.get(f"/api/files/{file_id}/diagrams/1").json()

    assert first["diagram"]["content"] == "graph TD\nA-->B"
    assert first["navigation"] == {
        "current": 0,
        "total": 2,
        "hasPrevious": False,
        "hasNext": True,
        "previousIndex": None,
        "nextIndex": 1
    }
    assert last["navigation"]["hasNext"] is False
    assert last["navigation"]["previousIndex"] == 0


def test_diagram_index_out_of_range(client):
    file_id = uploaded_id(client)

    response = client.get(f"/api/files/{file_id}/diagrams/5")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "DIAGRAM_NOT_FOUND"


def test_negative_diagram_index(client):
    file_id = uploaded_id(client)

    response = client.get(f"/api/files/{file_id}/diagrams/-1")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INDEX"


def test_mermaid_file_is_one_diagram(client):
    file_id = uploaded_id(client, "my flow.mmd", "graph LR\nX-->Y\n")

    data = client.get(f"/api/files/{file_id}/diagrams").json()

    assert data["totalDiagrams"] == 1
    assert data["diagrams"][0]["title"] == "my_flow"
    assert data["diagrams"][0]["content"] == "graph LR\nX-->Y"


def test_yang_file_has_no_diagrams(client):
    file_id = uploaded_id(client, "model.yang", "module example {}\n")

    assert client.get(f"/api/files/{file_id}/diagrams").json()["totalDiagrams"] == 0


def test_missing_file_diagrams(client):
    response = client.get("/api/files/123_missing.md/diagrams")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "FILE_NOT_FOUND"


def test_content_roundtrip_and_delete(client):
    file_id = uploaded_id(client)

    assert client.get(f"/api/files/{file_id}/content").json()["content"] == MARKDOWN

    updated = client.put(f"/api/files/{file_id}/content", json={"content": "# New\n"})
    assert updated.status_code == 200
    assert client.get(f"/api/files/{file_id}/content").json()["content"] == "# New\n"

    assert client.delete(f"/api/files/{file_id}").status_code == 200
    assert client.get(f"/api/files/{file_id}/content").status_code == 404
    assert client.delete(f"/api/files/{file_id}").status_code == 404


def test_update_missing_file(client):
    response = client.put("/api/files/123_missing.md/content", json={"content": "x"})

    assert response.status_code == 404


def test_document_endpoint(client):
    file_id = uploaded_id(client)

    data = client.get(f"/api/files/{file_id}/document").json()

    document = data["document"]
    assert data["fileId"] == file_id
    assert [d["id"] for d in document["diagrams"]] == ["diagram-0", "diagram-1"]
    assert [s["type"] for s in document["sections"]] == ["heading", "heading"]
    assert [t["title"] for t in document["tableOfContents"]] == [
        "Overview", "Overview", "Sequence", "Sequence"
    ]


def test_extract_from_body(client):
    response = client.post("/api/extract", json={"content": MARKDOWN})

    assert response.status_code == 200
    data = response.json()
    assert data["totalDiagrams"] == 2
    assert data["diagrams"][1]["title"] == "Sequence"
    assert data["diagrams"][1]["startLine"] == 7


def test_extract_raw_from_body(client):
    data = client.post("/api/extract/raw", json={"content": MARKDOWN}).json()

    assert data == {
        "totalDiagrams": 2,
        "diagrams": ["graph TD\nA-->B", "sequenceDiagram\nA->>B: hi"]
    }


def test_extract_requires_content(client):
    assert client.post("/api/extract", json={}).status_code == 422


def test_lint_config(client):
    data = client.get("/api/lint/config").json()

    assert data["fenceTags"] == ["mermaid", "mmd"]
    assert "flowchart" in data["supportedTypes"]
    assert all({"type", "name", "example"} <= set(t) for t in data["diagramTypes"])


def test_lint_single_definition(client):
    data = client.post("/api/lint/mermaid", json={"content": "graph TD\nA[oops --> B"}).json()

    assert data["valid"] is False
    assert data["totalDiagrams"] == 1
    assert data["results"][0]["errors"] == ["Unclosed '[' opened on line 2"]


def test_lint_markdown_document(client):
    data = client.post(
        "/api/lint/mermaid", json={"content": MARKDOWN, "markdown": True}
    ).json()

    assert data["valid"] is True
    assert [r["title"] for r in data["results"]] == ["Overview", "Sequence"]
    assert [r["diagramType"] for r in data["results"]] == ["flowchart", "sequenceDiagram"]


def test_sanitize_filename():
    assert FileManager.sanitize_filename("my file (1).md") == "my_file__1_.md"
    assert FileManager.original_name("1700000000000_doc.md") == "doc.md"


def test_path_traversal_is_rejected(upload_dir):
    manager = FileManager(APIConfig(upload_dir=str(upload_dir)))

    assert manager.get_file_path("../secret.md") is None
    assert manager.get_file_path("a/b.md") is None
    assert manager.get_file_path("") is None


def test_enforce_storage_limits_removes_oldest(upload_dir):
    manager = FileManager(APIConfig(upload_dir=str(upload_dir), max_stored_files=2))
    ids = [manager.save_file(f"doc{i}.md", b"# doc")["id"] for i in range(3)]
    for age, file_id in enumerate(ids):
        stamp = 1_000_000 + age * 100
        os.utime(upload_dir / file_id, (stamp, stamp))

    result = manager.enforce_storage_limits()

    assert result["removed_files"] == 1
    assert sorted(p.name for p in upload_dir.iterdir()) == sorted(ids[1:])


@pytest.fixture
def reset_limiter():
    limiter.reset()
    yield
    limiter.reset()


def test_rate_limit_rejects_past_budget(client, monkeypatch, reset_limiter):
    monkeypatch.setenv("RATE_LIMIT", "2/minute")

    statuses = [client.get("/api/health").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    response = client.get("/api/health")
    assert response.json()["error"]["code"] == "RATE_LIMITED"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_root_is_not_rate_limited(client, monkeypatch, reset_limiter):
    monkeypatch.setenv("RATE_LIMIT", "1/minute")

    assert [client.get("/").status_code for _ in range(3)] == [200, 200, 200]


def test_upload_spanning_several_chunks(client, upload_dir):
    content = "# Big\n" + "x" * (200 * 1024)

    stored = upload(client, "big.md", content).json()["files"][0]

    assert (upload_dir / stored["id"]).read_text() == content


def test_upload_over_limit_is_not_stored(client, upload_dir, monkeypatch):
    monkeypatch.setenv("MAX_FILE_SIZE_MB", "1")

    response = upload(client, "big.md", "x" * (1024 * 1024 + 1))

    assert response.status_code == 413
    assert list(upload_dir.iterdir()) == []


YANG_MODULE = (
    'module example-module {\n'
    '  namespace "urn:example:module";\n'
    '  prefix ex;\n'
    '  container config {\n'
    '    leaf hostname {\n'
    '      type string;\n'
    '    }\n'
    '  }\n'
    '}\n'
)


def test_parse_yang(client):
    response = client.post(
        "/api/yang/parse", json={"content": YANG_MODULE, "filename": "example-module.yang"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["parser"] == "pyang"
    assert data["metadata"]["prefix"] == "ex"
    assert data["tree"]["example-module"]["children"][0]["name"] == "config"


def test_parse_invalid_yang(client):
    data = client.post("/api/yang/parse", json={"content": "module broken {"}).json()

    assert data["valid"] is False
    assert data["filename"] == "temp.yang"
    assert data["errors"]


def test_parse_multiple_yang(client):
    files = [
        {"name": "base.yang", "content": 'module base { namespace "urn:base"; prefix b; }'},
        {"name": "app.yang", "content": (
            'module app { namespace "urn:app"; prefix a; import base { prefix b; } }'
        )},
    ]

    data = client.post("/api/yang/parse-multiple", json={"files": files}).json()

    assert [f["filename"] for f in data["files"]] == ["base.yang", "app.yang"]
    assert data["dependencies"] == {"app.yang": ["base"]}
    assert data["graph"]["edges"] == [{"source": "app.yang", "target": "base", "type": "import"}]
    assert data["summary"]["totalModules"] == 2
    assert data["summary"]["validModules"] == 2
    assert data["summary"]["totalErrors"] == 0


def test_parse_multiple_requires_list(client):
    assert client.post("/api/yang/parse-multiple", json={"files": "nope"}).status_code == 422


def test_parse_stored_yang_file(client):
    file_id = uploaded_id(client, "example-module.yang", YANG_MODULE)

    data = client.get(f"/api/yang/files/{file_id}").json()

    assert data["filename"] == "example-module.yang"
    assert data["valid"] is True


def test_parse_stored_non_yang_file(client):
    file_id = uploaded_id(client)

    response = client.get(f"/api/yang/files/{file_id}")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NOT_YANG_FILE"
