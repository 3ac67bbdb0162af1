"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Handler 抽象接口与共享传输逻辑 (base)。
- 维护 Provider 默认配置与模型列表 (registry)。
- 提供各厂商的具体实现 (anthropic_client、openai_client 等)。
- 管线步骤：消息转换、请求体构造、响应解析。
"""

from typing import Dict, Type

from assistant_core.config.settings import settings
from assistant_core.providers.anthropic_client import AnthropicClient
from assistant_core.providers.base import BaseHandler, ProviderHandler
from assistant_core.providers.deepseek_client import DeepSeekClient
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.ollama_client import OllamaClient
from assistant_core.providers.openai_client import OpenAIClient


HANDLERS: Dict[str, Type[BaseHandler]] = {
    "anthropic": AnthropicClient,
    "openai": OpenAIClient,
    "deepseek": DeepSeekClient,
    "gemini": GeminiClient,
    "ollama": OllamaClient,
}


def has_handler(name: str) -> bool:
    return name in HANDLERS


def create_handler(name: str, cfg=None) -> ProviderHandler:
    """根据 provider id 创建 Handler 实例。

    Raises:
        KeyError: 未注册的 provider。
    """

    return HANDLERS[name](cfg or settings)
