"""Plan and chat requests to the generative-AI service.

Both calls return a result value instead of raising; an `error` on the result
tells the caller to substitute its own fallback content.
"""

import json
import logging
import re
from typing import NamedTuple, Optional, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from evolua.config import get_settings
from evolua.schemas.chat import ChatMessage, ChatRole
from evolua.schemas.user import UserProfile
from evolua.services import llm_service

logger = logging.getLogger(__name__)
settings = get_settings()

COACH_SYSTEM_PROMPT = """\
You are "Coach Evolua+", a high-performance personal assistant focused on behavioural \
psychology, productivity and gamification.
Your tone must be:
1. Motivating but realistic (light stoic philosophy).
2. Short and direct (at most 3 short paragraphs).
3. Use emojis sparingly to keep things light.
4. Focused on "Action" and "Micro-habits".

The user is trying to improve their life. If they report a failure, be understanding but \
suggest an immediate correction. If they report a success, celebrate it.
"""

PLAN_PROMPT_TEMPLATE = """\
Create a daily plan of 3 simple micro-tasks for a person with this profile:
Name: {name}
Main focus: {focus_area}
Discipline level (1-10): {discipline_level}
Available time: {available_time} minutes.

Return ONLY a JSON array of strings, no markdown, e.g. ["Drink water", "Read for 5 min"].
"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

_titles_adapter = TypeAdapter(list[str])


class PlanResult(NamedTuple):
    titles: list[str]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ChatResult(NamedTuple):
    text: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AIGateway(Protocol):
    async def generate_plan(self, profile: UserProfile) -> PlanResult: ...

    async def send_chat_message(
        self, history: Sequence[ChatMessage], new_message: str, profile: UserProfile
    ) -> ChatResult: ...


def parse_plan(content: str) -> list[str]:
    """
    Parse the model output into task titles.

    Raises ValueError when the output is not a non-empty JSON array of strings.
    """
    text = content.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        titles = _titles_adapter.validate_python(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"plan is not a JSON array of strings: {exc}") from exc
    titles = [t.strip() for t in titles if t.strip()]
    if not titles:
        raise ValueError("plan contained no task titles")
    return titles


def build_plan_prompt(profile: UserProfile) -> str:
    return PLAN_PROMPT_TEMPLATE.format(
        name=profile.name,
        focus_area=profile.focus_area.value,
        discipline_level=profile.discipline_level,
        available_time=profile.available_time,
    )


def build_chat_prompt(
    history: Sequence[ChatMessage],
    new_message: str,
    profile: UserProfile,
    window: int,
) -> str:
    recent = list(history)[-window:] if window else []
    lines = [
        f"{'User' if msg.role == ChatRole.user else 'Coach'}: {msg.text}" for msg in recent
    ]
    return (
        f"User profile:\n"
        f"Name: {profile.name}\n"
        f"Goal: {profile.focus_area.value}\n\n"
        f"Recent history:\n"
        + "\n".join(lines)
        + f"\n\nUser: {new_message}\nCoach:"
    )


class LLMGateway:
    """AIGateway backed by llm_service."""

    def __init__(self, history_window: Optional[int] = None):
        self.history_window = (
            settings.COACH_HISTORY_WINDOW if history_window is None else history_window
        )

    async def generate_plan(self, profile: UserProfile) -> PlanResult:
        try:
            content, _, _ = await llm_service.chat_complete(
                messages=[{"role": "user", "content": build_plan_prompt(profile)}],
                temperature=0.7,
                max_tokens=512,
            )
            titles = parse_plan(content)
        except (llm_service.LLMServiceError, ValueError) as exc:
            logger.warning("Plan generation failed: %s", exc)
            return PlanResult(titles=[], error=str(exc))

        logger.info("Generated initial plan with %d task(s)", len(titles))
        return PlanResult(titles=titles)

    async def send_chat_message(
        self, history: Sequence[ChatMessage], new_message: str, profile: UserProfile
    ) -> ChatResult:
        prompt = build_chat_prompt(history, new_message, profile, self.history_window)
        try:
            content, _, _ = await llm_service.chat_complete(
                messages=[
                    {"role": "system", "content": COACH_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.9,
                max_tokens=600,
            )
        except llm_service.LLMServiceError as exc:
            logger.warning("Coach chat failed: %s", exc)
            return ChatResult(text="", error=str(exc))
        return ChatResult(text=content.strip())
