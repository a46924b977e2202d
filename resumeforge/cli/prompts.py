"""Interactive prompts (prompt_toolkit).

Every prompt blocks on the terminal, so the async entry points hand the
blocking work to a worker thread and the event loop stays free.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console

from ..collectors.github import validate_github_input
from ..collectors.linkedin import LinkedInInputMethod, parse_skills
from .ui import CORAL, SECONDARY, console

OUTPUT_FORMATS: Tuple[Tuple[str, str], ...] = (
    ("pdf", "PDF (recommended)"),
    ("docx", "DOCX (Word)"),
    ("both", "Both PDF & DOCX"),
)

LINKEDIN_METHODS: Tuple[Tuple[str, str], ...] = (
    (LinkedInInputMethod.PASTE.value, "Paste text from LinkedIn profile"),
    (LinkedInInputMethod.JSON.value, "Import JSON Resume file"),
    (LinkedInInputMethod.MANUAL.value, "Enter manually"),
    (LinkedInInputMethod.SKIP.value, "Skip LinkedIn data"),
)

JOB_METHODS: Tuple[Tuple[str, str], ...] = (
    ("paste", "Paste it here"),
    ("editor", "Multi-line editor (Esc then Enter to finish)"),
)

MIN_JOB_TEXT_CHARS = 10


class _CallableValidator(Validator):
    """Adapts ``check(text) -> True | message`` to prompt_toolkit."""

    def __init__(self, check: Callable[[str], Union[bool, str]]):
        self.check = check

    def validate(self, document: Document) -> None:
        result = self.check(document.text)
        if result is not True:
            raise ValidationError(message=str(result), cursor_position=len(document.text))


def _required(message: str = "Required") -> _CallableValidator:
    return _CallableValidator(lambda text: True if text.strip() else message)


def _job_text_check(text: str) -> Union[bool, str]:
    return True if len(text) > MIN_JOB_TEXT_CHARS else "Please provide more detail"


class Prompter:
    """Asks the user for everything the pipeline needs."""

    def __init__(self, session: Optional[PromptSession] = None, output: Optional[Console] = None):
        self.session = session or PromptSession()
        self.console = output or console

    # --- blocking primitives ---

    def _ask(
        self,
        message: str,
        validator: Optional[Validator] = None,
        default: str = "",
        multiline: bool = False,
    ) -> str:
        return self.session.prompt(
            f"  {message} ",
            validator=validator,
            validate_while_typing=False,
            default=default,
            multiline=multiline,
        ).strip()

    def _confirm(self, message: str, default: bool = True) -> bool:
        suffix = "(Y/n)" if default else "(y/N)"
        while True:
            answer = self.session.prompt(f"  {message} {suffix} ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.console.print("  Please answer y or n", style="yellow")

    def _select(self, message: str, choices: Sequence[Tuple[str, str]]) -> str:
        self.console.print(f"  [{CORAL}]{message}[/]")
        for index, (_, label) in enumerate(choices, start=1):
            self.console.print(f"    [{index}] {label}", markup=False)

        def check(text: str) -> Union[bool, str]:
            if text.strip().isdigit() and 1 <= int(text.strip()) <= len(choices):
                return True
            return f"Enter a number between 1 and {len(choices)}"

        answer = self._ask(">", validator=_CallableValidator(check), default="1")
        return choices[int(answer) - 1][0]

    def _info(self, message: str) -> None:
        self.console.print(f"  ℹ {message}", style=SECONDARY, markup=False)

    # --- pipeline prompts ---

    async def ask_github_url(self, existing: Optional[str] = None) -> Optional[str]:
        if existing:
            return existing
        answer = await asyncio.to_thread(
            self._ask,
            "GitHub profile URL or username:",
            _CallableValidator(validate_github_input),
        )
        return answer or None

    async def ask_job_description(self, existing: Optional[str] = None) -> str:
        if existing:
            return existing
        return await asyncio.to_thread(self._job_description)

    def _job_description(self) -> str:
        method = self._select("How would you like to provide the job description?", JOB_METHODS)
        if method == "editor":
            return self._ask(
                "Write or paste the job description:\n",
                validator=_CallableValidator(_job_text_check),
                multiline=True,
            )
        return self._ask(
            "Paste the job description (single line or URL):",
            validator=_CallableValidator(_job_text_check),
        )

    async def choose_linkedin_method(self) -> str:
        return await asyncio.to_thread(self._select, "How would you like to provide LinkedIn data?", LINKEDIN_METHODS)

    async def ask_linkedin_paste(self) -> str:
        return await asyncio.to_thread(self._linkedin_paste)

    def _linkedin_paste(self) -> str:
        self._info("Go to your LinkedIn profile, select all text, and paste it below.")
        self._info("The AI will extract structured data from the raw text. Press Esc then Enter to finish.")
        return self._ask("Paste your LinkedIn profile text:\n", multiline=True)

    async def ask_json_resume_path(self) -> str:
        return await asyncio.to_thread(self._ask, "Path to JSON Resume file:", _required("Path is required"))

    async def ask_linkedin_manual(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._linkedin_manual)

    def _linkedin_manual(self) -> Dict[str, Any]:
        """Walk through manual entry and return LinkedInProfile-shaped data."""
        self._info("Enter your professional details:")
        self.console.print("  " + "─" * 43, style="dim")

        profile: Dict[str, Any] = {
            "name": self._ask("Full name:", _required("Name is required")),
            "headline": self._ask("Professional headline:"),
            "summary": self._ask("Professional summary:"),
            "location": self._ask("Location:"),
            "email": self._ask("Email:"),
            "phone": self._ask("Phone:"),
            "website": self._ask("Website/Portfolio URL:"),
        }

        experience: List[Dict[str, Any]] = []
        add_more = self._confirm("Add work experience?", default=True)
        while add_more:
            experience.append(
                {
                    "title": self._ask("  Job title:", _required()),
                    "company": self._ask("  Company:", _required()),
                    "location": self._ask("  Location:"),
                    "startDate": self._ask("  Start date (e.g., Jan 2022):", _required()),
                    "endDate": self._ask("  End date (leave blank for current):"),
                    "description": self._ask("  Description (key achievements):"),
                }
            )
            add_more = self._confirm("Add another position?", default=False)

        education: List[Dict[str, Any]] = []
        add_more = self._confirm("Add education?", default=True)
        while add_more:
            education.append(
                {
                    "school": self._ask("  School:", _required()),
                    "degree": self._ask("  Degree:"),
                    "field": self._ask("  Field of study:"),
                    "startDate": self._ask("  Start date:"),
                    "endDate": self._ask("  End date:"),
                }
            )
            add_more = self._confirm("Add another?", default=False)

        profile["experience"] = experience
        profile["education"] = education
        profile["skills"] = parse_skills(self._ask("Skills (comma-separated):"))
        return profile

    async def ask_output_prefs(self, output_format: Optional[str], file_name: Optional[str]) -> Tuple[str, str]:
        return await asyncio.to_thread(self._output_prefs, output_format, file_name)

    def _output_prefs(self, output_format: Optional[str], file_name: Optional[str]) -> Tuple[str, str]:
        fmt = output_format or self._select("Output format:", OUTPUT_FORMATS)
        name = file_name or self._ask("Output file name (without extension):", default="resume") or "resume"
        return fmt, name

    async def confirm_generate(self) -> bool:
        return await asyncio.to_thread(self._confirm, "Ready to generate your resume?", True)
