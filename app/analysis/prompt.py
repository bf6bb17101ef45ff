from __future__ import annotations

from app.ai.types import ChatMessage
from app.analysis.grading import score_floor

_TONE = {
    "mild": {
        "voice": "gentle, encouraging and lightly humorous",
        "letter": "polite and kind, with a hint of playful teasing",
        "ceiling": 95,
    },
    "medium": {
        "voice": "witty, candid and sarcastic but fair",
        "letter": "dry and sarcastic while staying professional",
        "ceiling": 90,
    },
    "savage": {
        "voice": "brutally honest, merciless and savagely funny",
        "letter": "devastatingly blunt and over-the-top dramatic",
        "ceiling": 85,
    },
}

SYSTEM_PROMPT = (
    "You are RagebaitResume, a satirical hiring manager who reviews resumes and writes "
    "comedic rejection letters. You always follow the requested output format exactly."
)

_TEMPLATE = """Review the resume below in a {voice} tone.

First decide whether the document is actually a resume. Then score it from {floor} to {ceiling}, \
where {floor} is a weak resume and {ceiling} is an outstanding one, and give the letter grade that \
matches the score (A+ 97+, A 93+, A- 90+, B+ 87+, B 83+, B- 80+, C+ 77+, C 73+, C- 70+, D+ 67+, \
D 63+, D- 60+, F below 60).
{job_block}
Respond using exactly these section markers, each on its own line, in this order:

IS THIS A RESUME? YES or NO
SCORE: <number>
LETTER GRADE: <grade> (<one short sentence explaining the grade>)
REJECTION LETTER:
<a {letter} rejection letter written as an email with a greeting, two or three paragraphs of prose \
and a closing signed "The Rejection Bot">
FEEDBACK POINTS:
1. <specific problem with this resume>
(3 to 5 points)
CONSTRUCTIVE FEEDBACK:
1. <specific, actionable improvement>
(3 to 5 suggestions)

Do not add any other sections, headers or commentary.

RESUME:
{resume_text}
"""


def _job_block(job_position: str | None, job_field: str | None) -> str:
    position = (job_position or "").strip()
    field = (job_field or "").strip()
    if not position and not field:
        return ""

    if position and field:
        target = f'a "{position}" position in the {field} field'
    elif position:
        target = f'a "{position}" position'
    else:
        target = f"a position in the {field} field"
    return (
        f"\nThe candidate is applying for {target}. Judge the resume against what hiring managers "
        "for that role expect, mention the role in the rejection letter, and tailor every feedback "
        "point and suggestion to it.\n"
    )


def build_roast_prompt(
    resume_text: str,
    intensity: str,
    job_position: str | None = None,
    job_field: str | None = None,
) -> str:
    tone = _TONE.get(intensity, _TONE["medium"])
    return _TEMPLATE.format(
        voice=tone["voice"],
        letter=tone["letter"],
        floor=score_floor(intensity),
        ceiling=tone["ceiling"],
        job_block=_job_block(job_position, job_field),
        resume_text=resume_text.strip(),
    )


def build_roast_messages(
    resume_text: str,
    intensity: str,
    job_position: str | None = None,
    job_field: str | None = None,
) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_roast_prompt(resume_text, intensity, job_position, job_field)),
    ]
