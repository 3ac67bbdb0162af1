"""Gemini generateContent 适配器。

- URL: {base_url}，其中 {model} 占位符替换为实际模型名
- 认证: API key 作为 ?key= 查询参数
- 消息: 放在 "contents" 字段；assistant 映射为 "model"，其余为 "user"，
  内容包装成 {"parts": [{"text": ...}]}
- 响应: 部分端点直接返回顶层 text，标准结构为 candidates[0].content.parts[0].text
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from assistant_core.domain.models import Message, ResolvedConfig
from assistant_core.providers.base import BaseHandler


class GeminiClient(BaseHandler):
    """Gemini Provider 客户端实现。"""

    name = "gemini"
    label = "Gemini"
    messages_field = "contents"

    def transform_messages(self, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        return [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
        ]

    def build_url(self, resolved: ResolvedConfig) -> str:
        return resolved.base_url.replace("{model}", resolved.model)

    def build_params(self, resolved: ResolvedConfig) -> Dict[str, str]:
        return {"key": resolved.api_key or ""}

    def extract_error(self, data: Mapping[str, Any]) -> Optional[str]:
        error = data.get("error")
        if not error:
            return None
        if isinstance(error, dict):
            detail = error.get("message") or error.get("code")
            return str(detail) if detail else "Unknown error"
        return str(error)

    def extract_text(self, data: Mapping[str, Any]) -> Optional[str]:
        # 两种成功结构都保留：顶层 text 优先
        if data.get("text") is not None:
            return data["text"]
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return None
        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None
        return parts[0].get("text")
