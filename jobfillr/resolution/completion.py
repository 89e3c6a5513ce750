from __future__ import annotations

from jobfillr.schemas.answers import CompletionReport, CompletionSections
from jobfillr.schemas.profile import ProfileSnapshot

TOTAL_SECTIONS = 4


def score_completion(snapshot: ProfileSnapshot) -> CompletionReport:
    """Four-section presence score.

    Personal info counts as soon as it exists, whatever subfields are
    filled. Work experience and education need at least one entry, skills
    need at least one non-blank skill.
    """
    sections = CompletionSections(
        personal_info=snapshot.personal_info is not None,
        work_experience=len(snapshot.work_experiences) > 0,
        education=len(snapshot.educations) > 0,
        skills=any(skill.strip() for skill in snapshot.skills),
    )
    completed = sum(
        1
        for done in (
            sections.personal_info,
            sections.work_experience,
            sections.education,
            sections.skills,
        )
        if done
    )
    return CompletionReport(
        percentage=round(100 * completed / TOTAL_SECTIONS),
        sections=sections,
    )
