"""Assistant Core 顶层包。

提供与 Provider 无关的 LLM 查询管线：把一段有序的对话消息发送给
Anthropic / OpenAI / DeepSeek / Gemini / Ollama 之一，并返回统一的回答文本或错误信息。
"""

from assistant_core.api.service import query, run_query
from assistant_core.config.resolver import resolve
from assistant_core.domain.conversation import MessageHistory
from assistant_core.domain.models import Failure, Message, ResolvedConfig, Success

__all__ = [
    "Failure",
    "Message",
    "MessageHistory",
    "ResolvedConfig",
    "Success",
    "query",
    "resolve",
    "run_query",
]
