"""Sentry error monitoring for analysis runs.

Reporting is opt-in: nothing is sent unless SENTRY_DSN is set in the
environment or the .env file.
"""

import os
import sentry_sdk
from dotenv import load_dotenv


def init_sentry(env_file: str = None) -> bool:
    """Initialize Sentry error monitoring for an analysis run.

    Args:
        env_file: Optional .env path; the default .env lookup is used if None.

    Returns:
        True if Sentry was initialized, False if SENTRY_DSN is not configured.
    """
    load_dotenv(env_file)

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        send_default_pii=False,
        traces_sample_rate=0.0,
        attach_stacktrace=True,
    )
    return True


def set_analysis_context(config) -> None:
    """Attach the run's AnalyzerConfig to subsequent Sentry events."""
    sentry_sdk.set_tag("board", f"{config.num_paths}x{config.starting_depth}")
    sentry_sdk.set_tag("max_rounds", config.max_rounds)
    sentry_sdk.set_context("analyzer_config", config.to_dict())


def capture_exception(exception: Exception = None):
    """Report an exception that aborted an analysis.

    Args:
        exception: The exception to capture. If None, captures the current exception.
    """
    sentry_sdk.capture_exception(exception)
