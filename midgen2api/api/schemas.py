"""Request body models for the OpenAI-compatible endpoints.

Bodies are parsed manually in `http_api` and validated with these models so
that validation failures surface through the adapter's own error taxonomy
instead of FastAPI's default 422 responses. Unknown fields are ignored.
"""

from typing import List, Optional, Union

from pydantic import BaseModel


class ContentPart(BaseModel):
    """Content part in OpenAI's structured message format."""
    type: str
    text: Optional[str] = None


class ChatMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[Union[str, List[ContentPart]]] = None

    def text(self) -> str:
        """Return message content as plain text.

        Structured content keeps only `text` parts, joined by single spaces.
        """
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return " ".join(
            part.text for part in self.content if part.type == "text" and part.text
        )


class ChatCompletionRequest(BaseModel):
    messages: List[ChatMessage] = []
    model: Optional[str] = None
    stream: Optional[bool] = False

    def last_user_message(self) -> Optional[ChatMessage]:
        """Most recent message with `role == "user"`, scanning from the end."""
        for message in reversed(self.messages):
            if message.role == "user":
                return message
        return None


class ImageGenerationRequest(BaseModel):
    prompt: Optional[str] = None
    size: Optional[str] = None
    model: Optional[str] = None
    n: Optional[int] = None
    response_format: Optional[str] = None
