"""Ollama 本地 HTTP API 适配器。

- URL: http://localhost:11434/api/chat
- 认证: 无（本地网络），因此 registry 中 requires_api_key=False
- 消息: 只保留 role/content 两个字段
- 请求体: 强制 stream=false（Ollama 默认流式返回）
- 响应: message.content；错误为顶层 {"error": "<字符串>"}
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from assistant_core.domain.models import Message, ResolvedConfig
from assistant_core.providers.base import BaseHandler


class OllamaClient(BaseHandler):
    """Ollama Provider 客户端实现。"""

    name = "ollama"
    label = "Ollama"

    def transform_messages(self, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        return [{"role": m.role, "content": m.content} for m in messages]

    def finalize_body(self, body: Dict[str, Any], resolved: ResolvedConfig) -> Dict[str, Any]:
        body["stream"] = False
        return body

    def extract_text(self, data: Mapping[str, Any]) -> Optional[str]:
        message = data.get("message")
        if not isinstance(message, dict) or "content" not in message:
            return None
        return message.get("content") or ""
