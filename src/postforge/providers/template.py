"""Template provider for demo/testing.

Fills fixed post templates from a topic detected in the idea, so the
pipeline can be exercised without calling a real generation API.

- Provider adapter: narrow interface `generate_content(input) -> GeneratedContent`
- Forbidden: DB writes, aggregation logic, UI shaping
"""

from __future__ import annotations

import logging
import re
import time

from postforge.models.types import GeneratedContent, GenerationInput, VisualConcept
from postforge.providers.base import ContentProviderBase

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "professional growth"

# Checked in order; first keyword hit wins
TOPIC_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("ai", "artificial intelligence"), "AI and technology"),
    (("leadership", "leader", "leaders"), "leadership"),
    (("career", "careers", "job", "jobs"), "career development"),
    (("remote", "work from home"), "remote work"),
    (("startup", "startups", "entrepreneur", "entrepreneurs"), "entrepreneurship"),
]

HOOK_TEMPLATES = [
    [
        "Six months ago I changed one habit around {topic}. Here's what happened...",
        "Everyone is talking about {topic}. Most of them are missing the point.",
        "The most expensive myth about {topic} is one you probably believe.",
    ],
    [
        "The #1 mistake I see people make with {topic}? It's not what you think.",
        "I spent five years learning this lesson about {topic}. Let me save you the time.",
        "Stop doing this if you want to get better at {topic}. Here's why:",
    ],
    [
        "Hot take: most advice about {topic} is outdated. Here's what works now.",
        "I used to think {topic} required 80-hour weeks. I was wrong.",
        "Want the secret to {topic}? It's simpler than you think (but not easy):",
    ],
]

BODY_TEMPLATES = [
    [
        "I used to think I had {topic} figured out.",
        "I followed the accepted playbook. The results were flat.",
        "So I started questioning the assumptions behind it.",
        "Three shifts made the difference:",
        "1. Experiment before you optimize\n"
        "2. Build relationships, not transactions\n"
        "3. Measure impact, not activity",
        "If your approach to {topic} feels stuck, start with the assumptions.",
    ],
    [
        "Let me tell you a story about {topic}.",
        "When I started, I had read all the books and followed all the experts.",
        "Something was still missing.",
        "Things clicked when I stopped following everyone else's playbook:",
        "1. Authenticity beats strategy\n"
        "2. Consistency compounds over time\n"
        "3. Relationships matter more than metrics",
        "Every setback taught me something about {topic}. The detours were worth it.",
    ],
    [
        "Let's talk about what really matters in {topic}.",
        "First, forget about perfection. It's the enemy of progress.",
        "Second, embrace uncertainty. Nobody has it all figured out.",
        "Third, invest in people. Every opportunity I've had came from a relationship.",
        "None of this is new. Most of us just don't practice it.",
        "Pick one of these and apply it to {topic} this week.",
    ],
]

CTA_TEMPLATES = [
    [
        "What's one assumption about {topic} you've stopped believing? Tell me below.",
        "Follow for a practical note on {topic} every week.",
        "Agree or disagree? I read and reply to every comment.",
    ],
    [
        "What's your experience with {topic}? Drop a comment, I read every one.",
        "If this resonated, share it with someone who needs it today.",
        "Save this post for the next time {topic} feels overwhelming.",
    ],
]

TITLE_TEMPLATES = [
    [
        "What Nobody Tells You About {Topic}",
        "3 Shifts That Changed How I Approach {Topic}",
        "The {Topic} Playbook I Wish I Had Earlier",
    ],
    [
        "{Topic}: Lessons From the Detours",
        "Why Most {Topic} Advice Misses the Point",
        "A Practical Guide to {Topic} for Busy People",
    ],
]

VISUAL_TEMPLATES = [
    [
        'Split-screen "Then vs Now" graphic contrasting old and new approaches to {topic}',
        "Five-slide carousel: hook slide, three insight slides, CTA slide",
        'Infographic of the "3 shifts" as a path with before/after states',
    ],
    [
        "Candid photo-style illustration of a whiteboard session about {topic}",
        "Quote card with the post's strongest line in large type",
        "Simple chart showing effort vs. results over time",
    ],
]


def _mentions(text: str, keyword: str) -> bool:
    """Whole-word (or whole-phrase) match, so "ai" doesn't match "again"."""
    return re.search(rf"\b{re.escape(keyword)}\b", text) is not None


def detect_topic(text: str) -> str:
    """Pick a topic label from keywords in the text.

    Keywords are matched as whole words of the lowercased text.

    Examples:
        >>> detect_topic("How AI changes hiring")
        'AI and technology'
        >>> detect_topic("Emails I sent again and again")
        'professional growth'
    """
    lowered = text.lower()
    for keywords, topic in TOPIC_KEYWORDS:
        if any(_mentions(lowered, keyword) for keyword in keywords):
            return topic
    return DEFAULT_TOPIC


def _pick(templates: list, variation: int) -> list[str]:
    return templates[variation % len(templates)]


class TemplateProvider(ContentProviderBase):
    """Deterministic provider: same idea and variation yield the same content.

    Prompt settings in ``GenerationInput.prompts`` are accepted but not
    applied; the template text is fixed.
    """

    name = "template"

    def _topic(self, input: GenerationInput) -> str:
        topic = detect_topic(input.original_idea)
        if topic == DEFAULT_TOPIC and input.messages:
            # Fall back to the conversation when the idea itself is generic
            topic = detect_topic(" ".join(input.messages))
        return topic

    def generate_content(self, input: GenerationInput) -> GeneratedContent:
        """Generate structured content from templates.

        Args:
            input: Generation input parameters. ``variation`` selects the
                template set, cycling through the available sets.

        Returns:
            GeneratedContent with three hooks, a body, three CTAs, three
            titles and three visual concepts.
        """
        start_time = time.time()
        topic = self._topic(input)
        variation = input.variation
        # Titles capitalize the topic's first letter only ("AI and technology" stays intact)
        title_topic = topic[:1].upper() + topic[1:]

        hooks = [t.format(topic=topic) for t in _pick(HOOK_TEMPLATES, variation)]
        body_content = "\n\n".join(
            p.format(topic=topic) for p in _pick(BODY_TEMPLATES, variation)
        )
        ctas = [t.format(topic=topic) for t in _pick(CTA_TEMPLATES, variation)]
        titles = [t.format(Topic=title_topic) for t in _pick(TITLE_TEMPLATES, variation)]
        visual_concepts = [
            VisualConcept(description=t.format(topic=topic))
            for t in _pick(VISUAL_TEMPLATES, variation)
        ]

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"Template content for topic {topic!r} (variation {variation}) "
            f"generated in {latency_ms}ms"
        )

        return GeneratedContent(
            hooks=hooks,
            body_content=body_content,
            ctas=ctas,
            titles=titles,
            visual_concepts=visual_concepts,
        )

    def reply(self, input: GenerationInput, message: str) -> str:
        """Answer a chat message with canned coaching text.

        The first message of a conversation gets clarifying questions; later
        messages asking about hooks or CTAs get options for the topic.
        """
        if not input.messages:
            return (
                "Great idea! Before we draft the post, a few questions:\n\n"
                "1. Who is your target audience?\n"
                "2. What's the main takeaway readers should remember?\n"
                "3. What tone do you prefer (professional, conversational, inspirational)?\n\n"
                "Once I know this I'll create hooks, a body, CTAs, titles and visual ideas."
            )

        lowered = message.lower()
        topic = self._topic(input)
        variation = len(input.messages)

        if any(_mentions(lowered, k) for k in ("hook", "hooks", "start", "opening")):
            options = [t.format(topic=topic) for t in _pick(HOOK_TEMPLATES, variation)]
            return "Here are 3 hook options:\n\n" + "\n".join(
                f"{i}. {option}" for i, option in enumerate(options, start=1)
            )

        if any(_mentions(lowered, k) for k in ("cta", "ctas", "call to action")):
            options = [t.format(topic=topic) for t in _pick(CTA_TEMPLATES, variation)]
            return "Here are 3 CTA options:\n\n" + "\n".join(
                f"{i}. {option}" for i, option in enumerate(options, start=1)
            )

        return (
            "Thanks, that helps. To make the post more engaging:\n\n"
            "1. Lead with emotion or curiosity\n"
            "2. Use specific details: numbers, names, concrete examples\n"
            "3. Keep paragraphs to one or two sentences for mobile readers\n\n"
            "Want me to suggest hooks, structure the body, or propose CTAs?"
        )
