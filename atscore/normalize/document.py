from __future__ import annotations

from pydantic import BaseModel, Field

from atscore.schemas.scoring import (
    Certification,
    Education,
    FileMeta,
    Project,
    ResumeData,
    ScoringRequest,
    UserType,
    WorkExperience,
)

from .utils import (
    enumerate_lines,
    has_email,
    has_linkedin,
    has_phone,
    is_bullet_like,
    normalize_line,
    section_key,
    strip_bullet_prefix,
    words,
)


class ScoringDocument(BaseModel):
    """Fully populated view of one scoring request.

    Every field has a concrete default so analyzers never have to probe for
    missing structure.
    """

    text: str = ""
    lines: list[str] = Field(default_factory=list)
    bullets: list[str] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list)
    section_text: dict[str, str] = Field(default_factory=dict)
    word_count: int = 0
    name: str = ""
    summary: str = ""
    has_email: bool = False
    has_phone: bool = False
    has_linkedin: bool = False
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    job_description: str = ""
    user_type: UserType | None = None
    file_meta: FileMeta = Field(default_factory=FileMeta)

    @property
    def has_job_description(self) -> bool:
        return bool(self.job_description.strip())

    @property
    def has_contact_info(self) -> bool:
        return self.has_email or self.has_phone

    @property
    def text_lower(self) -> str:
        return self.text.lower()

    def experience_bullets(self) -> list[str]:
        return [bullet for entry in self.work_experience for bullet in entry.bullets if bullet.strip()]


def build_text_from_resume_data(data: ResumeData) -> str:
    """Render structured resume data as plain text for text-based analyzers."""
    parts: list[str] = []
    for value in (data.name, data.email, data.phone, data.linkedin, data.location):
        if value:
            parts.append(value)
    if data.summary:
        parts.extend(["SUMMARY", data.summary])
    if data.work_experience:
        parts.append("EXPERIENCE")
        for entry in data.work_experience:
            parts.append(f"{entry.role} at {entry.company} ({entry.year})".strip())
            parts.extend(f"• {bullet}" for bullet in entry.bullets)
    if data.education:
        parts.append("EDUCATION")
        parts.extend(f"{edu.degree} from {edu.school} ({edu.year})" for edu in data.education)
    if data.skills:
        parts.append("SKILLS")
        for group in data.skills:
            label = f"{group.category}: " if group.category else ""
            parts.append(label + ", ".join(group.items))
    if data.projects:
        parts.append("PROJECTS")
        for project in data.projects:
            parts.append(f"Project: {project.title}")
            if project.description:
                parts.append(project.description)
            parts.extend(f"• {bullet}" for bullet in project.bullets)
    if data.certifications:
        parts.append("CERTIFICATIONS")
        parts.extend(cert.name for cert in data.certifications if cert.name)
    return "\n".join(parts)


def _split_sections(lines: list[str]) -> tuple[list[str], dict[str, str]]:
    order: list[str] = []
    collected: dict[str, list[str]] = {}
    current: str | None = None
    for line in lines:
        key = section_key(line)
        if key:
            current = key
            if key not in order:
                order.append(key)
                collected[key] = []
            continue
        if current:
            collected[current].append(line)
    return order, {key: "\n".join(body) for key, body in collected.items()}


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for value in values:
        cleaned = normalize_line(value)
        lowered = cleaned.lower()
        if cleaned and lowered not in seen:
            seen.add(lowered)
            output.append(cleaned)
    return output


def normalize_request(request: ScoringRequest) -> ScoringDocument:
    data = request.resume_data or ResumeData()
    text = request.resume_text or ""
    if not text.strip() and request.resume_data is not None:
        text = build_text_from_resume_data(data)

    lines = [normalize_line(raw) for _, raw in enumerate_lines(text)]
    lines = [line for line in lines if line]
    text_bullets = [strip_bullet_prefix(raw) for _, raw in enumerate_lines(text) if is_bullet_like(raw)]
    structured_bullets = [
        bullet
        for entry in data.work_experience
        for bullet in entry.bullets
    ] + [bullet for project in data.projects for bullet in project.bullets]
    sections, section_text = _split_sections(lines)

    return ScoringDocument(
        text=text,
        lines=lines,
        bullets=_dedupe(text_bullets + structured_bullets),
        sections=sections,
        section_text=section_text,
        word_count=len(words(text)),
        name=data.name,
        summary=data.summary or section_text.get("summary", ""),
        has_email=bool(data.email) or has_email(text),
        has_phone=bool(data.phone) or has_phone(text),
        has_linkedin=bool(data.linkedin) or has_linkedin(text),
        work_experience=list(data.work_experience),
        education=list(data.education),
        skills=_dedupe([item for group in data.skills for item in group.items]),
        projects=list(data.projects),
        certifications=list(data.certifications),
        job_description=(request.job_description or "").strip(),
        user_type=request.user_type,
        file_meta=request.file_meta or FileMeta(),
    )
