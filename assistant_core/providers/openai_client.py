"""OpenAI Chat Completions 适配器。

- URL: https://api.openai.com/v1/chat/completions
- 认证: Authorization: Bearer <api_key>
- 消息: 原样透传（包括 system 消息）
- 响应: choices[0].message.content；错误为 {"error": {"message"/"type"}}
"""

from typing import Dict

from assistant_core.domain.models import ResolvedConfig
from assistant_core.providers.base import BaseHandler


class OpenAIClient(BaseHandler):
    """OpenAI Provider 客户端实现。"""

    name = "openai"
    label = "OpenAI"

    def build_headers(self, resolved: ResolvedConfig) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {resolved.api_key}",
        }
