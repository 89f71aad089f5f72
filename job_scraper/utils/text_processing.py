from __future__ import annotations
import re

REQUIREMENTS_MARKER = re.compile(r"requirements:", re.IGNORECASE)
QUALIFICATIONS_MARKER = re.compile(r"qualifications:", re.IGNORECASE)
BULLET_PREFIX = re.compile(r"^[•-]\s*")


def clean_text(text: str | None) -> str:
    """Trimmed text content, empty string when the node had none."""
    return (text or "").strip()


def extract_requirements_section(description: str) -> str:
    """Text between the first "requirements:" marker and "qualifications:".

    Markers match case-insensitively. When "requirements:" occurs more than
    once only the segment up to the second occurrence is used.
    """
    parts = REQUIREMENTS_MARKER.split(description or "")
    if len(parts) < 2:
        return ""
    return QUALIFICATIONS_MARKER.split(parts[1], maxsplit=1)[0]


def parse_requirements(description: str) -> list[str]:
    """Bullet lines ("•" or "-") of the requirements section, markers stripped."""
    section = extract_requirements_section(description)
    requirements = []
    for line in section.split("\n"):
        stripped = line.strip()
        if stripped.startswith("•") or stripped.startswith("-"):
            requirements.append(BULLET_PREFIX.sub("", stripped))
    return requirements
