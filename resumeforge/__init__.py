"""ResumeForge - tailored resumes from GitHub, LinkedIn and a job description."""

__version__ = "1.0.0"
