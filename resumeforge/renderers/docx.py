"""Native Word rendering of a ResumeData record with python-docx.

Layout mirrors the HTML template: same section order, palette and omission
rules, with dates pushed to the right margin by a tab stop.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from ..errors import RenderError
from ..schemas import ResumeData
from .html import PALETTE

logger = logging.getLogger(__name__)

FONT = "Inter"
CORAL = RGBColor.from_string(PALETTE["coral"][1:].upper())
TEXT = RGBColor.from_string(PALETTE["text"][1:].upper())
SECONDARY = RGBColor.from_string(PALETTE["secondary"][1:].upper())
BODY = RGBColor.from_string(PALETTE["body"][1:].upper())

NAME_SIZE = Pt(20)
SECTION_SIZE = Pt(11)
ENTRY_TITLE_SIZE = Pt(10.5)
DATE_SIZE = Pt(9)
TEXT_SIZE = Pt(9.5)
SMALL_SIZE = Pt(8.5)
SECTION_LETTER_SPACING = 60  # twentieths of a point

# Element order required by the OOXML schema.
_PBDR_SUCCESSORS = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap", "w:overflowPunct",
    "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN", "w:bidi", "w:adjustRightInd", "w:snapToGrid",
    "w:spacing", "w:ind", "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap", "w:outlineLvl", "w:divId",
    "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)
_SPACING_SUCCESSORS = (
    "w:w", "w:kern", "w:position", "w:sz", "w:szCs", "w:highlight", "w:u", "w:effect", "w:bdr",
    "w:shd", "w:fitText", "w:vertAlign", "w:rtl", "w:cs", "w:em", "w:lang", "w:eastAsianLayout",
    "w:specVanish", "w:oMath",
)


def build_docx(resume: ResumeData):
    """Build the resume as an in-memory ``docx.Document``."""
    document = Document()
    _setup_document(document)

    contact = resume.contact
    name = document.add_paragraph()
    name.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _spacing(name, after=3)
    _run(name, contact.name, NAME_SIZE, TEXT, bold=True)

    items = [contact.email, contact.phone, contact.location, contact.website]
    if contact.github:
        items.append(f"github.com/{contact.github}")
    items.append(contact.linkedin)
    contact_line = document.add_paragraph()
    contact_line.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _spacing(contact_line, after=6)
    _run(contact_line, "  |  ".join(item for item in items if item), DATE_SIZE, SECONDARY)
    _set_paragraph_bottom_border(contact_line, PALETTE["coral"], size=6)

    if resume.summary:
        summary = document.add_paragraph()
        _spacing(summary, before=4, after=6)
        _run(summary, resume.summary, TEXT_SIZE, BODY)

    if resume.experience:
        _section_title(document, "Experience")
        for exp in resume.experience:
            _entry_header(document, exp.title, f"{exp.start_date} – {exp.end_date or 'Present'}")
            subtitle = f"{exp.company} · {exp.location}" if exp.location else exp.company
            _entry_subtitle(document, subtitle)
            for bullet in exp.bullets:
                _bullet(document, bullet)

    if resume.projects:
        _section_title(document, "Projects")
        for project in resume.projects:
            header = document.add_paragraph()
            _spacing(header, before=4, after=1)
            _run(header, project.name, ENTRY_TITLE_SIZE, TEXT, bold=True)
            if project.technologies:
                _run(header, f"  {', '.join(project.technologies)}", SMALL_SIZE, SECONDARY)
            if project.url:
                _run(header, "  ", SMALL_SIZE, SECONDARY)
                _add_hyperlink(header, project.url, "↗", SMALL_SIZE, PALETTE["coral"])
            description = document.add_paragraph()
            _spacing(description, after=1.5)
            _run(description, project.description, TEXT_SIZE, BODY)
            for bullet in project.bullets or []:
                _bullet(document, bullet)

    categories = resume.skills.categories()
    if categories:
        _section_title(document, "Skills")
        for label, values in categories:
            line = document.add_paragraph()
            _spacing(line, after=1.5)
            _run(line, f"{label}: ", TEXT_SIZE, TEXT, bold=True)
            _run(line, ", ".join(values), TEXT_SIZE, BODY)

    if resume.education:
        _section_title(document, "Education")
        for edu in resume.education:
            degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
            dates = ""
            if edu.end_date:
                dates = f"{edu.start_date} – {edu.end_date}" if edu.start_date else edu.end_date
            _entry_header(document, degree, dates)
            _entry_subtitle(document, f"{edu.school} · GPA: {edu.gpa}" if edu.gpa else edu.school)
            for highlight in edu.highlights or []:
                _bullet(document, highlight)

    if resume.certifications:
        _section_title(document, "Certifications")
        for cert in resume.certifications:
            line = document.add_paragraph()
            _spacing(line, after=1.5)
            _run(line, cert.name, TEXT_SIZE, TEXT, bold=True)
            _run(line, f" – {cert.issuer}" + (f", {cert.date}" if cert.date else ""), TEXT_SIZE, SECONDARY)

    return document


def generate_docx(resume: ResumeData, output_dir: Union[str, Path], file_name: str) -> Path:
    """Write ``<file_name>.docx`` into *output_dir* and return its path.

    Raises:
        RenderError: The document could not be built or saved
    """
    output_path = Path(output_dir).resolve() / f"{file_name}.docx"
    try:
        document = build_docx(resume)
        document.save(str(output_path))
    except Exception as e:
        logger.debug("DOCX rendering failed", exc_info=True)
        raise RenderError("docx", str(e)) from e
    logger.debug("Wrote %s", output_path)
    return output_path


def _setup_document(document) -> None:
    section = document.sections[0]
    section.top_margin = Inches(0.5)
    section.bottom_margin = Inches(0.5)
    section.left_margin = Inches(0.6)
    section.right_margin = Inches(0.6)

    normal = document.styles["Normal"]
    normal.font.name = FONT
    normal.font.size = TEXT_SIZE
    normal.font.color.rgb = TEXT
    normal.paragraph_format.space_after = Pt(0)


def _run(paragraph, text: str, size, color: RGBColor, bold: bool = False):
    run = paragraph.add_run(text)
    run.font.name = FONT
    run.font.size = size
    run.font.color.rgb = color
    run.bold = bold
    return run


def _spacing(paragraph, before: Optional[float] = None, after: Optional[float] = None) -> None:
    fmt = paragraph.paragraph_format
    if before is not None:
        fmt.space_before = Pt(before)
    if after is not None:
        fmt.space_after = Pt(after)


def _section_title(document, title: str) -> None:
    paragraph = document.add_paragraph()
    _spacing(paragraph, before=10, after=4)
    run = _run(paragraph, title.upper(), SECTION_SIZE, CORAL, bold=True)
    _set_character_spacing(run, SECTION_LETTER_SPACING)
    _set_paragraph_bottom_border(paragraph, PALETTE["border"], size=4)


def _entry_header(document, title: str, date: str) -> None:
    paragraph = document.add_paragraph()
    _spacing(paragraph, before=4, after=1)
    _set_right_tab_stop(paragraph, document)
    _run(paragraph, title, ENTRY_TITLE_SIZE, TEXT, bold=True)
    if date:
        paragraph.add_run("\t")
        _run(paragraph, date, DATE_SIZE, SECONDARY)


def _entry_subtitle(document, text: str) -> None:
    paragraph = document.add_paragraph()
    _spacing(paragraph, after=2)
    _run(paragraph, text, TEXT_SIZE, SECONDARY)


def _bullet(document, text: str) -> None:
    paragraph = document.add_paragraph(style="List Bullet")
    _spacing(paragraph, after=1.5)
    _run(paragraph, text, TEXT_SIZE, TEXT)


def _set_right_tab_stop(paragraph, document) -> None:
    section = document.sections[0]
    usable_width = section.page_width - section.left_margin - section.right_margin
    paragraph.paragraph_format.tab_stops.add_tab_stop(usable_width, alignment=WD_TAB_ALIGNMENT.RIGHT)


def _set_paragraph_bottom_border(paragraph, color: str, size: int = 6) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    p_bdr = p_pr.find(qn("w:pBdr"))
    if p_bdr is None:
        p_bdr = OxmlElement("w:pBdr")
        p_pr.insert_element_before(p_bdr, *_PBDR_SUCCESSORS)
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(size))
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), color.lstrip("#").upper())
    p_bdr.append(bottom)


def _set_character_spacing(run, twentieths: int) -> None:
    r_pr = run._r.get_or_add_rPr()
    spacing = OxmlElement("w:spacing")
    spacing.set(qn("w:val"), str(twentieths))
    r_pr.insert_element_before(spacing, *_SPACING_SUCCESSORS)


def _add_hyperlink(paragraph, url: str, text: str, size, color: str) -> None:
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    run = OxmlElement("w:r")
    r_pr = OxmlElement("w:rPr")
    fonts = OxmlElement("w:rFonts")
    for attr in ("w:ascii", "w:hAnsi"):
        fonts.set(qn(attr), FONT)
    children: List = [fonts]
    color_el = OxmlElement("w:color")
    color_el.set(qn("w:val"), color.lstrip("#").upper())
    children.append(color_el)
    size_el = OxmlElement("w:sz")
    size_el.set(qn("w:val"), str(int(size.pt * 2)))
    children.append(size_el)
    for child in children:
        r_pr.append(child)
    run.append(r_pr)

    text_el = OxmlElement("w:t")
    text_el.text = text
    run.append(text_el)
    hyperlink.append(run)
    paragraph._p.append(hyperlink)
