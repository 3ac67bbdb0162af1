"""Anthropic Messages API 适配器。

- URL: https://api.anthropic.com/v1/messages
- 认证: x-api-key: <api_key>，另加 anthropic-version 协议版本头
- 消息: 丢弃 system 消息；assistant 保持不变，其余角色一律映射为 user
- 响应: content[0].text；错误为 {"type": "error", "error": {"message": ...}}
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from assistant_core.domain.models import Message, ResolvedConfig
from assistant_core.providers.base import BaseHandler
from assistant_core.providers.registry import ANTHROPIC_DEFAULTS


class AnthropicClient(BaseHandler):
    """Anthropic Provider 客户端实现。"""

    name = "anthropic"
    label = "Anthropic"

    def transform_messages(self, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        return [
            {
                "role": "assistant" if m.role == "assistant" else "user",
                "content": m.content,
            }
            for m in messages
            if m.role != "system"
        ]

    def build_headers(self, resolved: ResolvedConfig) -> Dict[str, str]:
        version = resolved.protocol_parameters.get(
            "anthropic_version", ANTHROPIC_DEFAULTS.additional_parameters["anthropic_version"]
        )
        return {
            "Content-Type": "application/json",
            "x-api-key": resolved.api_key or "",
            "anthropic-version": str(version),
        }

    def extract_error(self, data: Mapping[str, Any]) -> Optional[str]:
        error = data.get("error")
        if not error and data.get("type") != "error":
            return None
        if isinstance(error, dict):
            return error.get("message") or error.get("type") or "Unknown error"
        return str(error) if error else "Unknown error"

    def extract_text(self, data: Mapping[str, Any]) -> Optional[str]:
        content = data.get("content")
        if not isinstance(content, list) or not content or not isinstance(content[0], dict):
            return None
        return content[0].get("text")
