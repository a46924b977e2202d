"""CLI - Command line entry point for ResumeForge."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .. import __version__
from ..collectors.github import GitHubCollector
from ..config import github_token, load_raw_config, resolve_provider_settings, user_config_path
from ..config_validator import Severity, has_errors, validate_config
from ..errors import ResumeForgeError
from ..llm import ModelGateway
from ..observability import RunObserver, setup_logging
from ..pipeline import OUTPUT_FORMATS, ResumePipeline, RunOptions
from .prompts import Prompter
from .ui import TerminalUI, console

logger = logging.getLogger(__name__)

PROVIDER_LABELS = {
    "openai": "OpenAI",
    "anthropic": "Anthropic Claude",
    "gemini": "Google Gemini",
    "deepseek": "DeepSeek",
    "kimi": "Kimi",
    "glm": "GLM",
    "minimax": "MiniMax",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resumeforge",
        description="ResumeForge - build a tailored resume from GitHub, LinkedIn and a job description",
    )
    parser.add_argument("--github", "-g", help="GitHub profile URL or username")
    parser.add_argument("--job", "-j", help="Job description text")
    parser.add_argument(
        "--output",
        "-o",
        default="./output",
        help="Output directory (default: ./output)",
    )
    parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="pdf",
        help="Output format: pdf, docx, or both (default: pdf)",
    )
    parser.add_argument(
        "--name",
        "-n",
        default="resume",
        help="Output file name without extension (default: resume)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Verbose output (debug logging and a run summary)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _print_config_issues(issues) -> None:
    for issue in issues:
        icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"  {icon} [{issue.field}] {issue.message}", style=style, markup=False)


async def run_cli(args: argparse.Namespace, ui: TerminalUI) -> int:
    raw_config = load_raw_config()
    issues = validate_config(raw_config)
    if issues:
        _print_config_issues(issues)
        if has_errors(issues):
            console.print(
                f"\n💡 Fix the errors above in {user_config_path()}, then try again.",
                style="dim",
            )
            return 1

    settings = resolve_provider_settings(raw_config=raw_config)
    observer = RunObserver(console=ui.console) if args.verbose else None
    gateway = ModelGateway.from_settings(settings, observer=observer)
    ui.info(f"Using {PROVIDER_LABELS.get(settings.provider, settings.provider)} ({gateway.config.model})")

    pipeline = ResumePipeline(
        gateway=gateway,
        prompter=Prompter(output=ui.console),
        reporter=ui,
        github_collector=GitHubCollector(token=github_token()),
        observer=observer,
    )
    options = RunOptions(
        github=args.github,
        job_description=args.job,
        output_dir=args.output,
        output_format=args.output_format,
        file_name=args.name,
    )
    try:
        await pipeline.run(options)
    finally:
        if observer:
            observer.print_summary()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    ui = TerminalUI()
    ui.banner()

    try:
        return asyncio.run(run_cli(args, ui))
    except (KeyboardInterrupt, EOFError):
        console.print("\n⚠️ Interrupted.", style="yellow")
        return 0
    except ResumeForgeError as e:
        ui.error(e.message, e.hint)
        return 1
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        console.print(f"\n❌ Error: {e}", style="red", markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
