"""AI coach chat session with offline fallback replies."""

import logging
import time
import uuid
from typing import Callable, Optional

from evolua.schemas.chat import ChatMessage, ChatRole
from evolua.schemas.user import UserProfile
from evolua.services.ai_gateway import AIGateway, ChatResult

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "Sorry, I'm reorganizing my circuits. Please try again."
CONNECTION_FALLBACK = "I'm having trouble connecting right now. But stay focused!"


def _now_ms() -> int:
    return int(time.time() * 1000)


def welcome_message(profile: UserProfile, timestamp: int) -> ChatMessage:
    return ChatMessage(
        id="welcome",
        role=ChatRole.model,
        text=(
            f"Hi {profile.name}! I'm Coach Evolua+. I'm looking at your "
            f"{profile.focus_area.value} profile. How can I help you grow today?"
        ),
        timestamp=timestamp,
    )


class CoachSession:
    """
    One chat transcript. Not persisted; a new session starts with the welcome
    message.

    Only one reply can be outstanding: `send` returns None without doing
    anything while `is_loading` is set.
    """

    def __init__(
        self,
        profile: UserProfile,
        gateway: AIGateway,
        now_ms: Callable[[], int] = _now_ms,
    ):
        self.profile = profile
        self.gateway = gateway
        self.now_ms = now_ms
        self.is_loading = False
        self.messages: list[ChatMessage] = [welcome_message(profile, now_ms())]

    async def send(self, text: str) -> Optional[ChatMessage]:
        if not text.strip() or self.is_loading:
            return None

        # Context is the transcript before this message
        history = list(self.messages)
        self.messages.append(
            ChatMessage(id=uuid.uuid4().hex, role=ChatRole.user, text=text, timestamp=self.now_ms())
        )
        self.is_loading = True
        try:
            result = await self.gateway.send_chat_message(history, text, self.profile)
        except Exception as exc:
            logger.warning("Coach gateway raised, using fallback reply: %s", exc)
            result = ChatResult(text="", error=str(exc))
        finally:
            self.is_loading = False

        if not result.ok:
            reply_text = CONNECTION_FALLBACK
        elif not result.text:
            reply_text = EMPTY_REPLY_FALLBACK
        else:
            reply_text = result.text

        reply = ChatMessage(
            id=uuid.uuid4().hex, role=ChatRole.model, text=reply_text, timestamp=self.now_ms()
        )
        self.messages.append(reply)
        return reply
