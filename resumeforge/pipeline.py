"""Run orchestration - the six sequential steps of a resume build.

1. GitHub profile (failure is reported, the run continues without it)
2. LinkedIn / professional data (import failure propagates)
3. Job description analysis (failure is fatal)
4. Output preferences
5. Confirmation, then resume generation (failure is fatal)
6. Output files, one renderer per format (failures are reported per format)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from .collectors.github import GitHubCollector
from .collectors.linkedin import LinkedInResult, collect_linkedin_data
from .errors import CollectionError, ConfigurationError, NoProfileDataError, RenderError, SchemaValidationError
from .llm import ModelGateway
from .observability import RunObserver
from .renderers.docx import generate_docx
from .renderers.pdf import generate_pdf
from .schemas import GitHubProfile, JobDescription, ResumeData

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6
OUTPUT_FORMATS = ("pdf", "docx", "both")

Renderer = Callable[[ResumeData, Path, str], Awaitable[Path]]


async def _render_docx(resume: ResumeData, output_dir: Path, file_name: str) -> Path:
    return await asyncio.to_thread(generate_docx, resume, output_dir, file_name)


DEFAULT_RENDERERS: Dict[str, Renderer] = {
    "pdf": generate_pdf,
    "docx": _render_docx,
}


@dataclass
class RunOptions:
    """Inputs for one run; None means ask interactively."""

    github: Optional[str] = None
    job_description: Optional[str] = None
    output_dir: str = "./output"
    output_format: Optional[str] = None
    file_name: Optional[str] = "resume"


@dataclass
class RunOutcome:
    status: str  # "completed" | "cancelled"
    written: List[Path] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    output_dir: Optional[Path] = None


def formats_for(output_format: str) -> List[str]:
    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Unknown output format '{output_format}'",
            hint=f"Use one of: {', '.join(OUTPUT_FORMATS)}",
        )
    return ["pdf", "docx"] if output_format == "both" else [output_format]


class ResumePipeline:
    """Drives collectors, the model gateway and renderers for one run."""

    def __init__(
        self,
        gateway: ModelGateway,
        prompter,
        reporter,
        github_collector: Optional[GitHubCollector] = None,
        renderers: Optional[Dict[str, Renderer]] = None,
        observer: Optional[RunObserver] = None,
    ):
        self.gateway = gateway
        self.prompter = prompter
        self.reporter = reporter
        self.github_collector = github_collector or GitHubCollector()
        self.renderers = renderers if renderers is not None else dict(DEFAULT_RENDERERS)
        self.observer = observer

    async def run(self, options: RunOptions) -> RunOutcome:
        """Run all steps in order.

        Raises:
            ImportFileError: A LinkedIn import failed
            NoProfileDataError: Neither GitHub nor LinkedIn data was collected
            GenerationError: Job analysis or resume generation failed
            SchemaValidationError: The model reply did not match its record schema
        """
        github = await self._step(1, "GitHub Profile", self._collect_github(options.github))
        linkedin = await self._step(2, "LinkedIn / Professional Data", self._collect_linkedin())

        if github is None and linkedin.empty:
            raise NoProfileDataError()

        job = await self._step(3, "Target Job Description", self._analyze_job(options.job_description))
        output_format, file_name = await self._step(
            4,
            "Output Preferences",
            self.prompter.ask_output_prefs(options.output_format, options.file_name),
        )
        formats = formats_for(output_format)

        if not await self.prompter.confirm_generate():
            self.reporter.info("Cancelled.")
            return RunOutcome(status="cancelled")
        self.reporter.blank()

        resume = await self._step(5, "Generating Resume with AI", self._generate(github, linkedin, job))
        return await self._step(6, "Creating Output Files", self._write_outputs(resume, options, formats, file_name))

    async def _step(self, number: int, name: str, work: Awaitable):
        self.reporter.step(number, TOTAL_STEPS, name)
        self.reporter.divider()
        if self.observer:
            self.observer.log_step_start(number, name)
        start = time.time()
        try:
            return await work
        finally:
            if self.observer:
                self.observer.log_step_end(number, name, (time.time() - start) * 1000)
            self.reporter.blank()

    async def _collect_github(self, github: Optional[str]) -> Optional[GitHubProfile]:
        url = await self.prompter.ask_github_url(github)
        if not url:
            self.reporter.info("Skipping GitHub data")
            return None

        try:
            with self.reporter.spinner("Fetching GitHub data..."):
                profile = await self.github_collector.fetch_profile(url)
        except (CollectionError, SchemaValidationError) as e:
            self._record_error("github", e)
            self.reporter.error(f"Failed to fetch GitHub: {e}", getattr(e, "hint", None))
            return None

        self.reporter.success(
            f"Found {profile.name or profile.username} "
            f"({profile.public_repos} repos, {len(profile.languages)} languages)"
        )
        return profile

    async def _collect_linkedin(self) -> LinkedInResult:
        result = await collect_linkedin_data(self.prompter)
        if result.profile is not None:
            self.reporter.success(f"Loaded profile for {result.profile.name}")
        elif result.raw_pasted_text:
            self.reporter.success("Captured profile text (AI will parse it)")
        else:
            self.reporter.info("No LinkedIn data provided")
        return result

    async def _analyze_job(self, job_description: Optional[str]) -> JobDescription:
        job_text = await self.prompter.ask_job_description(job_description)
        try:
            with self.reporter.spinner("Analyzing job description with AI..."):
                job = await self.gateway.analyze_job_description(job_text)
        except Exception as e:
            self._record_error("job_analysis", e)
            self.reporter.error("Failed to analyze job description")
            raise

        where = f" at {job.company}" if job.company else ""
        self.reporter.success(f"Analyzed: {job.title}{where} ({len(job.keywords or [])} keywords found)")
        return job

    async def _generate(self, github, linkedin: LinkedInResult, job: JobDescription) -> ResumeData:
        try:
            with self.reporter.spinner("AI is crafting your tailored resume..."):
                resume = await self.gateway.generate_resume(github, linkedin.profile, linkedin.raw_pasted_text, job)
        except Exception as e:
            self._record_error("generation", e)
            self.reporter.error("Failed to generate resume")
            raise
        self.reporter.success("Resume content generated")
        return resume

    async def _write_outputs(
        self,
        resume: ResumeData,
        options: RunOptions,
        formats: List[str],
        file_name: str,
    ) -> RunOutcome:
        output_dir = Path(options.output_dir).expanduser().resolve()
        output_dir.mkdir(parents=True, exist_ok=True)
        outcome = RunOutcome(status="completed", output_dir=output_dir)

        for fmt in formats:
            renderer = self.renderers[fmt]
            try:
                with self.reporter.spinner(f"Generating {fmt.upper()}..."):
                    path = await renderer(resume, output_dir, file_name)
            except RenderError as e:
                self._record_error(fmt, e)
                self.reporter.error(e.message)
                outcome.failed[fmt] = e.message
                continue
            self.reporter.success(f"{fmt.upper()}: {path}")
            outcome.written.append(path)

        self.reporter.divider()
        if outcome.written:
            self.reporter.success("Resume generation complete!")
        self.reporter.info(f"Files saved to: {output_dir}/")
        return outcome

    def _record_error(self, error_type: str, error: Exception) -> None:
        logger.debug("%s failed", error_type, exc_info=error)
        if self.observer:
            self.observer.log_error(error_type, str(error))
