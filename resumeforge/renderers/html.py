"""HTML rendering of a ResumeData record (also the PDF source)."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..schemas import ResumeData

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "resume.html.j2"

PALETTE = {
    "coral": "#D97757",
    "text": "#141413",
    "secondary": "#5A5A58",
    "border": "#E8E6DC",
    "body": "#3a3a38",
}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_html(resume: ResumeData) -> str:
    """Render *resume* as a standalone HTML page.

    Sections with no backing data are left out entirely.
    """
    template = _env.get_template(TEMPLATE_NAME)
    return template.render(resume=resume, palette=PALETTE)
