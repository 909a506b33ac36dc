"""
Task number rules: a task number repeats the first segment of its project
number (e.g. project "20031-00" -> prefix "20031-") followed by a short suffix.
"""
import logging

from timetracker.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_SUFFIX_LENGTH = 5


def required_prefix(project_number: str) -> str:
    """Return the part of *project_number* before its first '-', plus '-'."""
    first_dash = project_number.find("-")
    head = project_number[:first_dash] if first_dash > 0 else project_number
    return head + "-"


def validate_task_number(project_number: str, candidate) -> str:
    """
    Check *candidate* against the prefix derived from *project_number*.

    Returns the candidate unchanged when valid, raises ValidationError naming
    the broken rule otherwise.
    """
    if candidate is None or not str(candidate).strip():
        logger.warning("Task number missing")
        raise ValidationError("Task number is required")

    prefix = required_prefix(project_number)
    if not candidate.startswith(prefix):
        logger.warning("Task number %s does not start with %s", candidate, prefix)
        raise ValidationError(f"Task number must start with {prefix}")

    suffix = candidate[len(prefix):]
    if not suffix:
        logger.warning("Task number %s has an empty suffix", candidate)
        raise ValidationError(f"Task number suffix is required after {prefix}")
    if len(suffix) > MAX_SUFFIX_LENGTH:
        logger.warning("Task number %s suffix too long", candidate)
        raise ValidationError(
            f"Task number suffix must be at most {MAX_SUFFIX_LENGTH} characters"
        )
    return candidate
