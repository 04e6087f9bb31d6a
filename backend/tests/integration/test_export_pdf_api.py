"""Tests for the /api/v1/export-pdf endpoint with a fake browser session."""

from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from docprint.config import Settings
from docprint.main import create_app
from tests.unit.fake_page_session import FakePageSession, FakeSessionFactory, page_responder


class NavigationTimeout(Exception):
    pass


@asynccontextmanager
async def _client(factory: FakeSessionFactory, base_url: str = "http://docs.test", **settings):
    app = create_app(settings=Settings(**settings), session_factory=factory)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url=base_url) as client:
            yield client


@pytest.mark.asyncio
async def test_export_returns_pdf_attachment():
    session = FakePageSession(responder=page_responder(), pdf_bytes=b"%PDF-1.7 test")
    factory = FakeSessionFactory(session)

    async with _client(factory) as client:
        response = await client.get("/api/v1/export-pdf", params={"path": "/guides/setup"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="guides-setup.pdf"'
    assert response.content == b"%PDF-1.7 test"
    assert session.visited[0][0] == "http://docs.test/guides/setup"


@pytest.mark.asyncio
async def test_export_uses_explicit_filename_and_forwards_cookies():
    session = FakePageSession(responder=page_responder())
    factory = FakeSessionFactory(session)

    async with _client(factory, base_url="https://docs.test") as client:
        response = await client.get(
            "/api/v1/export-pdf",
            params={"path": "guides/setup", "filename": "report"},
            headers={"Cookie": "sid=abc; __Secure-t=1"},
        )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="report.pdf"'
    assert session.visited[0][0] == "https://docs.test/guides/setup"
    assert [(c.name, c.secure) for c in session.cookies] == [("sid", True), ("__Secure-t", True)]
    assert session.cookies[1].url == "https://docs.test"


@pytest.mark.asyncio
async def test_non_ascii_path_gets_encoded_filename_header():
    session = FakePageSession(responder=page_responder(), pdf_bytes=b"%PDF-1.7 test")
    factory = FakeSessionFactory(session)

    async with _client(factory) as client:
        response = await client.get("/api/v1/export-pdf", params={"path": "/docs/文档"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == (
        "attachment; filename=\"docs-__.pdf\"; filename*=utf-8''docs-%E6%96%87%E6%A1%A3.pdf"
    )
    assert response.content == b"%PDF-1.7 test"


@pytest.mark.asyncio
async def test_quoted_filename_cannot_break_disposition_header():
    factory = FakeSessionFactory(FakePageSession(responder=page_responder()))

    async with _client(factory) as client:
        response = await client.get(
            "/api/v1/export-pdf",
            params={"path": "/guides/setup", "filename": 'x"; y=1'},
        )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="x; y=1.pdf"'


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"path": ""}])
async def test_missing_path_returns_400_without_session(params):
    session = FakePageSession()
    factory = FakeSessionFactory(session)

    async with _client(factory) as client:
        response = await client.get("/api/v1/export-pdf", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing path parameter"}
    assert factory.launch_options == []


@pytest.mark.asyncio
async def test_generation_failure_returns_500_with_details():
    session = FakePageSession(goto_error=NavigationTimeout("Timeout 30000ms exceeded."))
    factory = FakeSessionFactory(session)

    async with _client(factory) as client:
        response = await client.get("/api/v1/export-pdf", params={"path": "/slow"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to generate PDF",
        "details": "Timeout 30000ms exceeded.",
    }
    assert session.close_count == 1


@pytest.mark.asyncio
async def test_export_config_comes_from_settings():
    session = FakePageSession(responder=page_responder(height=1000))
    factory = FakeSessionFactory(session)

    async with _client(factory, export_page_width=1200, export_preset="nextra") as client:
        response = await client.get("/api/v1/export-pdf", params={"path": "/"})

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="document.pdf"'
    width, height, _ = session.pdf_requests[0]
    assert (width, height) == (1200, 1060)
    assert session.viewport == (1200, 600)


@pytest.mark.asyncio
async def test_health_reports_ready_exporter():
    factory = FakeSessionFactory(FakePageSession())

    async with _client(factory, export_content_selector="main") as client:
        response = await client.get("/api/v1/health")

    assert response.json()["exporter_ready"] is True
    assert response.json()["content_selector"] == "main"


@pytest.mark.asyncio
async def test_health_reports_the_app_settings():
    factory = FakeSessionFactory(FakePageSession())

    async with _client(factory, app_version="9.9.9", app_env="staging") as client:
        response = await client.get("/api/v1/health")

    data = response.json()
    assert data["version"] == "9.9.9"
    assert data["environment"] == "staging"
