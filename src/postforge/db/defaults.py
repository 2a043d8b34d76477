"""Default prompt settings seeded on schema creation."""

from __future__ import annotations

from sqlalchemy.orm import Session

from postforge.db.schema import Setting

DEFAULT_SETTINGS: dict[str, str] = {
    "master_voice_prompt": (
        "Write with clarity, credibility and decisiveness. The reader is smart and busy.\n"
        "- Lead with the point: the first sentence states the conclusion\n"
        "- Prefer concrete specifics (numbers, dates, thresholds) over abstractions\n"
        "- Short paragraphs, active voice, minimal filler\n"
        "- Do not invent facts, dates, quotes, or commitments"
    ),
    "linkedin_tone_prompt": (
        "LinkedIn tone modifier:\n"
        "- Concise and thoughtful, one clear takeaway per post\n"
        "- Short paragraphs for mobile readability\n"
        "- End with a clear question or a single CTA"
    ),
    "hooks_agent_prompt": (
        "You are an expert content hook writer.\n"
        "Your hooks should stop the scroll, create curiosity, be 1-2 sentences max, "
        "and deliver real value instead of clickbait."
    ),
    "body_agent_prompt": (
        "You are an expert content body writer.\n"
        "Write 150-300 words in short paragraphs with specific details and examples, "
        "flowing logically from hook to conclusion."
    ),
    "ctas_agent_prompt": (
        "You are an expert call-to-action writer.\n"
        "Your CTAs should be clear, actionable, match the content's tone, "
        "and feel natural rather than pushy."
    ),
    "thumbnails_agent_prompt": (
        "You are an expert thumbnail concept designer.\n"
        "Concepts should be visually striking and communicate the content's value at a glance."
    ),
}


def seed_default_settings(session: Session) -> int:
    """Insert default settings that don't exist yet.

    Existing rows are never overwritten, so user customizations survive
    restarts.

    Args:
        session: Database session.

    Returns:
        Number of settings inserted.
    """
    existing = {key for (key,) in session.query(Setting.key).all()}
    inserted = 0
    for key, value in DEFAULT_SETTINGS.items():
        if key in existing:
            continue
        session.add(Setting(id=key, key=key, value=value))
        inserted += 1
    return inserted
