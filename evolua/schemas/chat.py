import enum

from pydantic import BaseModel


class ChatRole(str, enum.Enum):
    user = "user"
    model = "model"


class ChatMessage(BaseModel):
    id: str
    role: ChatRole
    text: str
    timestamp: int  # epoch milliseconds
