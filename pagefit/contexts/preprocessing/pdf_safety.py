"""
Character-count and PDF-safety heuristics used by the preprocessor.

These are deliberately independent of the layout context's height model: the
preprocessor uses them only to decide compact mode and the global font scale,
so a record can be "sparse" by one measure and "dense" by the other.
"""

from pagefit.contexts.preprocessing.resume_record import ResumeRecord

# Floor for the total character count (keeps ratios finite for empty records)
MIN_TOTAL_CHARS = 50

# Estimated heights above this are not considered safe for a single printed page
PDF_SAFE_HEIGHT = 800

# Separators for overflow entries flattened into achievements; count_characters
# treats each as a single space
TITLE_SEPARATOR = " — "
RELOCATION_SEPARATOR = " • "

HEADER_HEIGHT = 80
SUMMARY_MIN_HEIGHT = 40
SUMMARY_CHARS_PER_LINE = 80
SUMMARY_LINE_HEIGHT = 20
EXPERIENCE_HEIGHT = 60
BULLET_HEIGHT = 20
EDUCATION_HEIGHT = 40
ACHIEVEMENT_HEIGHT = 20
MAX_ACHIEVEMENTS_HEIGHT = 100
VOLUNTEER_HEIGHT = 50
SKILLS_HEIGHT = 40
SOFT_SKILLS_HEIGHT = 30
CERTIFICATION_HEIGHT = 25
LANGUAGES_HEIGHT = 30
INTERESTS_HEIGHT = 30


def estimate_content_height(resume: ResumeRecord) -> float:
    """Rough rendered height (px) used only to flag records that may not print on one page."""
    height = HEADER_HEIGHT

    if resume.summary:
        height += max(
            SUMMARY_MIN_HEIGHT,
            len(resume.summary) / SUMMARY_CHARS_PER_LINE * SUMMARY_LINE_HEIGHT,
        )

    height += len(resume.experience) * EXPERIENCE_HEIGHT
    for exp in resume.experience:
        height += len(exp.bullets) * BULLET_HEIGHT

    height += len(resume.education) * EDUCATION_HEIGHT

    if resume.achievements:
        height += min(len(resume.achievements) * ACHIEVEMENT_HEIGHT, MAX_ACHIEVEMENTS_HEIGHT)
    if resume.volunteer:
        height += len(resume.volunteer) * VOLUNTEER_HEIGHT
    if resume.skills:
        height += SKILLS_HEIGHT
    if resume.soft_skills:
        height += SOFT_SKILLS_HEIGHT
    if resume.certifications:
        height += len(resume.certifications) * CERTIFICATION_HEIGHT
    if resume.languages:
        height += LANGUAGES_HEIGHT
    if resume.interests:
        height += INTERESTS_HEIGHT

    return height


def is_pdf_safe(resume: ResumeRecord) -> bool:
    return estimate_content_height(resume) <= PDF_SAFE_HEIGHT


def count_characters(resume: ResumeRecord) -> int:
    """
    Total characters across the textual fields, floored at MIN_TOTAL_CHARS.

    Entries are joined with single spaces the way they read on the page, so
    separators count towards the total. Relocation separators inside
    achievements count as one space each, which keeps the count of a
    preprocessed record at or below the count of its source.
    """
    experience_text = " ".join(
        f"{exp.role} {exp.company} {exp.duration} {' '.join(exp.bullets)}"
        for exp in resume.experience
    )
    education_text = " ".join(
        f"{edu.degree} {edu.school} {edu.year}" for edu in resume.education
    )
    certification_text = " ".join(f"{cert.name}{cert.year}" for cert in resume.certifications)
    volunteer_text = " ".join(
        f"{vol.role} {vol.org} {' '.join(vol.description)}" for vol in resume.volunteer
    )
    achievement_text = " ".join(resume.achievements)
    for separator in (TITLE_SEPARATOR, RELOCATION_SEPARATOR):
        achievement_text = achievement_text.replace(separator, " ")

    total = sum(
        len(text)
        for text in (
            resume.name,
            resume.title,
            resume.summary,
            experience_text,
            education_text,
            " ".join(resume.skills),
            " ".join(resume.soft_skills),
            achievement_text,
            " ".join(resume.languages),
            certification_text,
            volunteer_text,
        )
    )
    return max(total, MIN_TOTAL_CHARS)
