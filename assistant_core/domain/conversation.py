"""会话消息历史。

MessageHistory 由调用方按会话创建并持有，查询管线只读取其中的消息。
持久化由外部负责：这里只提供 to_dict / from_saved_messages 两个转换入口。
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .models import Message


TITLE_SNIPPET_LENGTH = 40
LONG_HIGHLIGHT_THRESHOLD = 280
GENERIC_QUESTION = "I have a question for you."

_HIGHLIGHT_PATTERNS = (
    re.compile(r'Highlighted text:\s*\n?"([^"]+)"'),
    re.compile(r'Selected text:\s*\n?"([^"]+)"'),
)
_REQUEST_PATTERN = re.compile(r"\[Request\]\s*\n([^\n]+)")
_USER_PART_PATTERNS = (
    re.compile(r"\[User Question\]\s*\n([^\n]+)"),
    re.compile(r"\[Additional user input\]\s*\n([^\n]+)"),
)

MessageLike = Union[Message, Mapping[str, Any]]


def as_message(item: MessageLike) -> Message:
    if isinstance(item, Message):
        return item
    return Message.from_dict(item)


def _snippet(text: str) -> str:
    snippet = text[:TITLE_SNIPPET_LENGTH].replace("\n", " ")
    if len(text) > TITLE_SNIPPET_LENGTH:
        snippet += "..."
    return snippet


class MessageHistory:
    """有序、可变的消息列表，以及 model / chat_id / prompt_action 元数据。

    追加消息从不改变已有顺序；clear() 会保留开头的 system 消息。
    """

    def __init__(self, system_prompt: Optional[str] = None, prompt_action: Optional[str] = None):
        self.messages: List[Message] = []
        self.model: Optional[str] = None
        self.chat_id: Optional[str] = None
        self.prompt_action = prompt_action
        if system_prompt:
            self.messages.append(Message(role="system", content=system_prompt))

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def add_user_message(self, content: str, is_context: bool = False) -> int:
        self.messages.append(Message(role="user", content=content, is_context=is_context))
        return len(self.messages)

    def add_assistant_message(self, content: str, model: Optional[str] = None) -> int:
        self.messages.append(Message(role="assistant", content=content))
        if model:
            self.model = model
        return len(self.messages)

    def get_messages(self) -> List[Message]:
        return self.messages

    def get_last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def get_model(self) -> Optional[str]:
        return self.model

    def clear(self) -> "MessageHistory":
        """清空消息，但保留开头的 system 消息。"""

        if self.messages and self.messages[0].role == "system":
            self.messages = [self.messages[0]]
        else:
            self.messages = []
        return self

    @classmethod
    def from_saved_messages(
        cls,
        messages: Optional[Iterable[MessageLike]],
        model: Optional[str] = None,
        chat_id: Optional[str] = None,
        prompt_action: Optional[str] = None,
    ) -> "MessageHistory":
        """从已持久化的消息重建会话。"""

        history = cls(prompt_action=prompt_action)
        history.messages = [as_message(m) for m in messages or []]
        history.model = model
        history.chat_id = chat_id
        return history

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "model": self.model,
            "chat_id": self.chat_id,
            "prompt_action": self.prompt_action,
        }

    def suggested_title(self) -> str:
        """根据用户消息推断一个会话标题。

        优先级：高亮文本 > [Request] 段落 > 第一条非 context 的用户消息 > "Chat"。
        """

        prefix = f"{self.prompt_action} - " if self.prompt_action else ""
        highlighted: Optional[str] = None

        for msg in self.messages:
            if msg.role != "user":
                continue
            if "[Context]" in msg.content or "Highlighted text:" in msg.content:
                for pattern in _HIGHLIGHT_PATTERNS:
                    match = pattern.search(msg.content)
                    if match:
                        highlighted = match.group(1)
                        break
            if not highlighted and not msg.is_context:
                match = _REQUEST_PATTERN.search(msg.content)
                if match:
                    return prefix + _snippet(match.group(1))

        if highlighted:
            return prefix + _snippet(highlighted)

        for msg in self.messages:
            if msg.role != "user" or msg.is_context:
                continue
            user_part = msg.content
            for pattern in _USER_PART_PATTERNS:
                match = pattern.search(msg.content)
                if match:
                    user_part = match.group(1)
                    break
            first_words = _snippet(user_part.strip())
            if first_words and first_words != GENERIC_QUESTION:
                return prefix + first_words

        return prefix + "Chat"

    def create_result_text(
        self,
        highlighted_text: Optional[str] = None,
        features: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """渲染展示给用户的对话文本。"""

        features = features or {}
        parts: List[str] = []

        threshold = features.get("long_highlight_threshold") or LONG_HIGHLIGHT_THRESHOLD
        should_hide = bool(features.get("hide_highlighted_text")) or (
            bool(features.get("hide_long_highlights"))
            and bool(highlighted_text)
            and len(highlighted_text) > threshold
        )
        if not should_hide and highlighted_text:
            if features.get("is_file_browser_context"):
                parts.append(f"Book metadata:\n{highlighted_text}\n\n")
            else:
                parts.append(f'Highlighted text: "{highlighted_text}"\n\n')

        if features.get("debug"):
            parts.append("Messages sent to AI:\n-------------------\n\n")
            last_user = len(self.messages) - 1
            for i in range(len(self.messages) - 1, -1, -1):
                if self.messages[i].role == "user":
                    last_user = i
                    break
            for msg in self.messages[: last_user + 1]:
                if msg.role == "user":
                    marker = "▶ "
                elif msg.role == "assistant":
                    marker = "◉ "
                else:
                    marker = "● "
                tag = " [Initial]" if msg.is_context else ""
                parts.append(f"{marker}{msg.role.capitalize()}{tag}: {msg.content}\n\n")
            parts.append("-------------------\n\n")

        # 第一条消息通常是 system 指令，不展示
        for msg in self.messages[1:]:
            if msg.is_context:
                continue
            label = "▶ User: " if msg.role == "user" else "◉ Assistant: "
            parts.append(f"{label}{msg.content}\n\n")

        return "".join(parts)
