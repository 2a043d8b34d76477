#!/usr/bin/env python3
"""Seed a demo database with published sessions and performance notes.

Creates a handful of sessions, generates output for each with the
template provider (with a chat reply and a placeholder image),
publishes most of them and records metrics, so the stats and
published views have something to show.

Usage:
    python scripts/seed_demo.py [db_path]

The database defaults to data/postforge.db under the project root.
Seeding is skipped when the database already has published sessions.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from postforge.aggregation.performance import summarize_performance  # noqa: E402
from postforge.db import repo  # noqa: E402
from postforge.db.session import DEFAULT_DB_PATH, Database  # noqa: E402
from postforge.providers.placeholder import PlaceholderImageProvider  # noqa: E402
from postforge.providers.template import TemplateProvider  # noqa: E402
from postforge.workflow.images import generate_image  # noqa: E402
from postforge.workflow.outputs import generate_output  # noqa: E402
from postforge.workflow.performance import PerformanceInput, record_performance  # noqa: E402
from postforge.workflow.sessions import (  # noqa: E402
    NewSessionInput,
    create_session,
    send_chat_message,
    update_session,
)

# (idea, follow-up message, metrics or None to leave unpublished)
DEMO_POSTS: list[tuple[str, str, PerformanceInput | None]] = [
    (
        "What AI tools actually saved me time this quarter",
        "Keep it practical, list the tools",
        PerformanceInput(views=4200, likes=180, comments=36, reposts=12, notes="Posted Tue 8am"),
    ),
    (
        "The leadership mistake I made in my first 90 days",
        "Tell it as a story",
        PerformanceInput(views=2900, likes=210, comments=51, reposts=None),
    ),
    (
        "Why I stopped chasing job titles",
        "Add a concrete example",
        PerformanceInput(views=1500, likes=64, comments=None, reposts=3),
    ),
    (
        "Remote onboarding checklist that actually works",
        "Make it a checklist",
        PerformanceInput(notes="Waiting on numbers"),
    ),
    (
        "Three startup metrics I wish I had tracked earlier",
        "Shorter hooks please",
        None,
    ),
]


def seed_database(database: Database) -> int:
    """Create demo sessions. Returns number of sessions created."""
    provider = TemplateProvider()
    image_provider = PlaceholderImageProvider()

    with database.session_scope() as session:
        if repo.count_published_sessions(session) > 0:
            print("Demo data already exists, skipping")
            return 0

        for idea, message, metrics in DEMO_POSTS:
            entity = create_session(session, NewSessionInput(original_idea=idea))
            send_chat_message(session, entity.id, message, provider)
            output = generate_output(session, entity.id, provider)
            generate_image(
                session,
                entity.id,
                output.visual_concepts[0]["description"],
                image_provider,
                visual_concept_index=0,
            )
            print(f"  Created session: {entity.title}")

            if metrics is None:
                continue
            update_session(session, entity.id, status="published")
            record_performance(session, entity.id, metrics)
            print("    Published with performance note")

    return len(DEMO_POSTS)


def print_stats(database: Database) -> None:
    """Print the aggregate performance summary."""
    with database.session_scope() as session:
        stats = summarize_performance(session)

    print(f"Published: {stats.total_published} ({stats.sessions_with_metrics} with metrics)")
    print(f"Totals:    {stats.totals.model_dump()}")
    print(f"Averages:  {stats.averages.model_dump()}")
    best = stats.best_performing.by_views
    if best is not None:
        print(f"Most viewed: {best.title} ({best.value} views)")


def main() -> int:
    """Main entry point."""
    db_path = Path(sys.argv[1]) if len(sys.argv) > 1 else PROJECT_ROOT / DEFAULT_DB_PATH

    print("=" * 60)
    print("postforge Demo Seeding Script")
    print("=" * 60)

    with Database.from_path(db_path) as database:
        print("\n[1/2] Seeding database...")
        database.create_schema()
        seed_database(database)

        print("\n[2/2] Performance summary...")
        print_stats(database)

    print("\n" + "=" * 60)
    print("Demo seeding complete!")
    print(f"Database: {db_path}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
