"""Usage Pulse API: recruiter activity analytics for the job portal."""

__version__ = "1.0.0"
