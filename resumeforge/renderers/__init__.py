"""Document renderers for ResumeData records."""

from .docx import build_docx, generate_docx
from .html import PALETTE, render_html
from .pdf import PDF_TIMEOUT_MS, generate_pdf

__all__ = [
    "PALETTE",
    "PDF_TIMEOUT_MS",
    "build_docx",
    "generate_docx",
    "generate_pdf",
    "render_html",
]
