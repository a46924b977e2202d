"""Tests for PDF rendering with a fake Playwright browser."""

from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

from resumeforge.errors import RenderError
from resumeforge.renderers import pdf as pdf_renderer
from resumeforge.renderers.pdf import PDF_TIMEOUT_MS, generate_pdf


class FakePage:
    def __init__(self, calls, fail_on=None):
        self.calls = calls
        self.fail_on = fail_on

    async def set_content(self, html, **kwargs):
        self.calls["set_content"] = (html, kwargs)
        if self.fail_on == "set_content":
            raise PlaywrightError("Timeout 30000ms exceeded.")

    async def evaluate(self, expression):
        self.calls["evaluate"] = expression

    async def pdf(self, **kwargs):
        self.calls["pdf"] = kwargs
        Path(kwargs["path"]).write_bytes(b"%PDF-1.4")


class FakeBrowser:
    def __init__(self, calls, fail_on=None):
        self.calls = calls
        self.fail_on = fail_on

    async def new_page(self):
        return FakePage(self.calls, self.fail_on)

    async def close(self):
        self.calls["closed"] = True


class FakeChromium:
    def __init__(self, calls, fail_on=None):
        self.calls = calls
        self.fail_on = fail_on

    async def launch(self, **kwargs):
        self.calls["launch"] = kwargs
        if self.fail_on == "launch":
            raise PlaywrightError("Executable doesn't exist")
        return FakeBrowser(self.calls, self.fail_on)


class FakePlaywrightContext:
    def __init__(self, calls, fail_on=None):
        self.chromium = FakeChromium(calls, fail_on)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def fake_playwright(monkeypatch):
    calls = {}
    state = {"fail_on": None}

    def factory():
        return FakePlaywrightContext(calls, state["fail_on"])

    monkeypatch.setattr(pdf_renderer, "async_playwright", factory)
    return calls, state


@pytest.mark.asyncio
async def test_generate_pdf_prints_letter_page(resume, tmp_path, fake_playwright):
    calls, _ = fake_playwright

    path = await generate_pdf(resume, tmp_path, "ada")

    assert path == (tmp_path / "ada.pdf").resolve()
    assert path.read_bytes().startswith(b"%PDF")
    html, content_kwargs = calls["set_content"]
    assert "<h1>Ada Lovelace</h1>" in html
    assert content_kwargs == {"wait_until": "networkidle", "timeout": PDF_TIMEOUT_MS}
    assert calls["evaluate"] == "document.fonts.ready"
    assert calls["pdf"]["format"] == "Letter"
    assert calls["pdf"]["print_background"] is True
    assert set(calls["pdf"]["margin"].values()) == {"0"}
    assert calls["launch"]["headless"] is True
    assert calls["closed"] is True


@pytest.mark.asyncio
async def test_browser_launch_failure(resume, tmp_path, fake_playwright):
    _, state = fake_playwright
    state["fail_on"] = "launch"

    with pytest.raises(RenderError) as exc_info:
        await generate_pdf(resume, tmp_path, "ada")
    assert exc_info.value.format == "pdf"
    assert exc_info.value.message.startswith("PDF failed:")


@pytest.mark.asyncio
async def test_timeout_closes_browser(resume, tmp_path, fake_playwright):
    calls, state = fake_playwright
    state["fail_on"] = "set_content"

    with pytest.raises(RenderError, match="Timeout"):
        await generate_pdf(resume, tmp_path, "ada")
    assert calls["closed"] is True
    assert "pdf" not in calls
