"""DeepSeek 适配器。

DeepSeek 的 chat/completions 端点与 OpenAI 完全兼容，
仅默认 URL 与模型不同（见 registry.DEEPSEEK_DEFAULTS）。
"""

from assistant_core.providers.openai_client import OpenAIClient


class DeepSeekClient(OpenAIClient):
    name = "deepseek"
    label = "DeepSeek"
