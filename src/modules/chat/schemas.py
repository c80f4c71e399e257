from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NO_RESPONSE = "No response received from the model."
CREDENTIALS_NOT_SET = "Azure OpenAI credentials are not set."
MODEL_NOT_SET = "Chat model is not set."
ERROR_PREFIX = "Error: "


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    model: str = Field(..., min_length=1)
    messages: list[Message] = Field(..., min_length=1)


class ChatCompletion(BaseModel):
    model: str
    choices: list[Message] = []


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    BACKEND = "backend"


class ChatFailure(BaseModel):
    kind: ErrorKind
    message: str


class ChatResult(BaseModel):
    """Outcome of a synchronous completion.

    Exactly one of three shapes: ``text`` set (success), ``error`` set
    (failure), or neither (the backend returned no choices).
    """

    text: str | None = None
    error: ChatFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.error is None and self.text is None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ChatResult":
        return cls(error=ChatFailure(kind=kind, message=message))

    def render(self) -> str:
        """Single-string form used by the plain-text endpoint and the CLI."""
        if self.error is not None:
            return ERROR_PREFIX + self.error.message
        if self.text is None:
            return NO_RESPONSE
        return self.text


class StreamFragment(BaseModel):
    role: str | None = None
    content: str | None = None

    @property
    def is_blank(self) -> bool:
        return not self.role and not self.content
