"""Output generation and refinement.

Runs the generation provider against a session's idea and conversation
and stores the result. The first generated version is kept as the
``*_original`` copy; later regenerations and edits only touch the
current fields.
"""

from __future__ import annotations

import logging
from typing import Any

from postforge.core.errors import NotFoundError
from postforge.core.identity import new_id, utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import OutputEntity, OutputSection
from postforge.models.types import GeneratedContent, GenerationInput
from postforge.providers.base import ContentProviderBase

logger = logging.getLogger(__name__)

# Section name -> OutputEntity field it rewrites
SECTION_FIELDS: dict[str, str] = {
    "hooks": "hooks",
    "body": "body_content",
    "ctas": "ctas",
    "titles": "titles",
    "visuals": "visual_concepts",
}


def _build_input(session: DbSession, session_id: str, idea: str, variation: int) -> GenerationInput:
    messages = repo.get_messages_for_session(session, session_id)
    settings = {s.key: s.value for s in repo.list_settings(session)}
    return GenerationInput(
        original_idea=idea,
        messages=[m.content for m in messages],
        prompts=settings,
        variation=variation,
    )


def _section_value(content: GeneratedContent, section: str) -> Any:
    if section == "visuals":
        return [v.model_dump() for v in content.visual_concepts]
    if section == "body":
        return content.body_content
    return getattr(content, section)


def generate_output(
    session: DbSession,
    session_id: str,
    provider: ContentProviderBase,
) -> OutputEntity:
    """Generate (or regenerate) structured content for a session.

    Every regeneration bumps the output's ``revision`` and asks the
    provider for that variation, so repeated calls yield fresh content.

    Args:
        session: Database session.
        session_id: Session to generate for.
        provider: Content generation provider.

    Returns:
        The stored OutputEntity.

    Raises:
        NotFoundError: If the session doesn't exist.
    """
    content_session = repo.get_content_session(session, session_id)
    if content_session is None:
        raise NotFoundError(f"Session not found: {session_id}")

    existing = repo.get_output(session, session_id)
    revision = existing.revision + 1 if existing is not None else 0

    gen_input = _build_input(session, session_id, content_session.original_idea, revision)
    content = provider.generate_content(gen_input)
    visual_concepts = _section_value(content, "visuals")

    now = utcnow()
    if existing is not None:
        output = repo.update_output(
            session,
            session_id,
            updated_at=now,
            hooks=content.hooks,
            body_content=content.body_content,
            ctas=content.ctas,
            titles=content.titles,
            visual_concepts=visual_concepts,
            revision=revision,
        )
        logger.info(
            f"Regenerated output for session {session_id} with {provider.name} "
            f"(revision {revision})"
        )
    else:
        output = repo.create_output(
            session,
            OutputEntity(
                id=new_id(),
                session_id=session_id,
                hooks=content.hooks,
                hooks_original=content.hooks,
                body_content=content.body_content,
                body_content_original=content.body_content,
                ctas=content.ctas,
                ctas_original=content.ctas,
                visual_concepts=visual_concepts,
                visual_concepts_original=visual_concepts,
                titles=content.titles,
                titles_original=content.titles,
                created_at=now,
                updated_at=now,
            ),
        )
        logger.info(f"Generated output for session {session_id} with {provider.name}")

    repo.commit(session)
    return output


def regenerate_section(
    session: DbSession,
    session_id: str,
    section: OutputSection,
    provider: ContentProviderBase,
) -> OutputEntity:
    """Regenerate a single section of the current output.

    Only the current field of ``section`` is rewritten; other sections,
    selections and the ``*_original`` copies are left alone.

    Args:
        session: Database session.
        session_id: Session whose output is regenerated.
        section: One of hooks, body, ctas, titles, visuals.
        provider: Content generation provider.

    Returns:
        Updated OutputEntity.

    Raises:
        NotFoundError: If the session or its output doesn't exist.
    """
    content_session = repo.get_content_session(session, session_id)
    if content_session is None:
        raise NotFoundError(f"Session not found: {session_id}")

    existing = repo.get_output(session, session_id)
    if existing is None:
        raise NotFoundError("Output not found. Please generate content first.")

    revision = existing.revision + 1
    gen_input = _build_input(session, session_id, content_session.original_idea, revision)
    content = provider.generate_content(gen_input)

    output = repo.update_output(
        session,
        session_id,
        updated_at=utcnow(),
        revision=revision,
        **{SECTION_FIELDS[section]: _section_value(content, section)},
    )
    repo.commit(session)

    logger.info(f"Regenerated {section} for session {session_id} (revision {revision})")
    return output


def refine_output(session: DbSession, session_id: str, changes: dict[str, Any]) -> OutputEntity:
    """Apply user edits to the current output.

    Args:
        session: Database session.
        session_id: Session whose output is edited.
        changes: Field name -> new value, for current (non-original) fields only.

    Returns:
        Updated OutputEntity. Unchanged when ``changes`` is empty.

    Raises:
        NotFoundError: If the session has no output.
    """
    existing = repo.get_output(session, session_id)
    if existing is None:
        raise NotFoundError(f"Output not found for session: {session_id}")
    if not changes:
        return existing

    output = repo.update_output(session, session_id, updated_at=utcnow(), **changes)
    repo.commit(session)
    return output
