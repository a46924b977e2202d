"""PDF rendering through headless Chromium (Playwright)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..errors import RenderError
from ..schemas import ResumeData
from .html import render_html

logger = logging.getLogger(__name__)

PDF_TIMEOUT_MS = 30000
_ZERO_MARGINS = {"top": "0", "bottom": "0", "left": "0", "right": "0"}


async def generate_pdf(resume: ResumeData, output_dir: Union[str, Path], file_name: str) -> Path:
    """Write ``<file_name>.pdf`` into *output_dir* and return its path.

    Raises:
        RenderError: The browser could not be started or printing failed
    """
    html = render_html(resume)
    output_path = Path(output_dir).resolve() / f"{file_name}.pdf"

    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle", timeout=PDF_TIMEOUT_MS)
                await page.evaluate("document.fonts.ready")
                await page.pdf(
                    path=str(output_path),
                    format="Letter",
                    print_background=True,
                    margin=_ZERO_MARGINS,
                )
            finally:
                await browser.close()
    except (PlaywrightError, OSError) as e:
        logger.debug("PDF rendering failed", exc_info=True)
        raise RenderError("pdf", str(e)) from e

    logger.debug("Wrote %s", output_path)
    return output_path
