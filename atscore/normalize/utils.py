from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_LINKEDIN_RE = re.compile(r"linkedin\.com/", re.IGNORECASE)
_SECTION_ALIASES: dict[str, tuple[str, ...]] = {
    "summary": ("summary", "professional summary", "objective", "career objective", "profile", "about me"),
    "experience": (
        "experience",
        "work experience",
        "professional experience",
        "employment history",
        "work history",
        "internships",
    ),
    "education": ("education", "academic background", "academics", "qualifications"),
    "skills": ("skills", "technical skills", "core competencies", "key skills", "technologies"),
    "projects": ("projects", "academic projects", "personal projects", "key projects"),
    "certifications": ("certifications", "certificates", "licenses", "licenses & certifications"),
    "achievements": ("achievements", "awards", "honors", "accomplishments"),
}
_SECTION_LOOKUP = {alias: key for key, aliases in _SECTION_ALIASES.items() for alias in aliases}
_WORD_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9+#.\-]*")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+|\n+")


def enumerate_lines(text: str) -> list[tuple[int, str]]:
    return [(index + 1, line) for index, line in enumerate(text.splitlines())]


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def section_key(line: str) -> str | None:
    """Canonical section key for a heading line, or None when the line is not a known heading."""
    stripped = normalize_line(line).lower().rstrip(":").strip()
    if not stripped or len(stripped) > 40:
        return None
    return _SECTION_LOOKUP.get(stripped)


def has_email(text: str) -> bool:
    return bool(_EMAIL_RE.search(text))


def has_phone(text: str) -> bool:
    return bool(_PHONE_RE.search(text))


def has_linkedin(text: str) -> bool:
    return bool(_LINKEDIN_RE.search(text))


def words(text: str) -> list[str]:
    return _WORD_RE.findall(text)


def split_sentences(text: str) -> list[str]:
    return [normalize_line(part) for part in _SENTENCE_SPLIT_RE.split(text) if normalize_line(part)]
