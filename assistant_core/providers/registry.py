"""Provider 默认配置与模型列表。

每个 Provider 一条只读的 ProviderDefaults 记录，进程启动时加载，
resolver 按 provider id 查找并与调用方配置合并。

additional_parameters 中的部分键属于“协议元数据”（如 anthropic_version），
只在 Transport 层作为请求头使用，resolver 会把它们拆出，绝不进入请求体。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Literal, Mapping


ProviderName = Literal["anthropic", "openai", "deepseek", "gemini", "ollama"]

# 未指定 provider 时的兜底值
FALLBACK_PROVIDER: ProviderName = "anthropic"

# 只用于请求头、不能写进请求体的参数
PROTOCOL_KEYS: FrozenSet[str] = frozenset({"anthropic_version"})


@dataclass(frozen=True)
class ProviderDefaults:
    """某个 Provider 的默认配置。

    - requires_api_key: 本地网络类 Provider（Ollama）可以不带密钥。
    - base_url 中的 {model} 占位符由 Transport 用实际模型名替换。
    """

    provider: str
    model: str
    base_url: str
    additional_parameters: Mapping[str, Any] = field(default_factory=dict)
    requires_api_key: bool = True


ANTHROPIC_DEFAULTS = ProviderDefaults(
    provider="anthropic",
    model="claude-sonnet-4-20250514",
    base_url="https://api.anthropic.com/v1/messages",
    additional_parameters={
        "anthropic_version": "2023-06-01",
        "max_tokens": 4096,
    },
)

OPENAI_DEFAULTS = ProviderDefaults(
    provider="openai",
    model="gpt-4.1",
    base_url="https://api.openai.com/v1/chat/completions",
    additional_parameters={
        "temperature": 0.7,
        "max_tokens": 4096,
    },
)

DEEPSEEK_DEFAULTS = ProviderDefaults(
    provider="deepseek",
    model="deepseek-chat",
    base_url="https://api.deepseek.com/v1/chat/completions",
    additional_parameters={
        "temperature": 0.7,
        "max_tokens": 4096,
    },
)

OLLAMA_DEFAULTS = ProviderDefaults(
    provider="ollama",
    model="deepseek-r1:14b",
    base_url="http://localhost:11434/api/chat",
    additional_parameters={"temperature": 0.7},
    requires_api_key=False,
)

GEMINI_DEFAULTS = ProviderDefaults(
    provider="gemini",
    model="gemini-1.5-flash",
    base_url="https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
    additional_parameters={"temperature": 0.7},
)


PROVIDER_REGISTRY: Mapping[str, ProviderDefaults] = {
    "anthropic": ANTHROPIC_DEFAULTS,
    "openai": OPENAI_DEFAULTS,
    "deepseek": DEEPSEEK_DEFAULTS,
    "ollama": OLLAMA_DEFAULTS,
    "gemini": GEMINI_DEFAULTS,
}


# 设置界面可选的模型（默认模型排在最前）
MODEL_LISTS: Mapping[str, List[str]] = {
    "anthropic": [
        "claude-sonnet-4-20250514",
        "claude-3-7-sonnet-20250219",
        "claude-3-5-haiku-20241022",
        "claude-opus-4-20250514",
    ],
    "openai": [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "o4-mini",
        "o1",
        "o3-mini",
        "gpt-4o",
        "gpt-4o-mini",
    ],
    "deepseek": [
        "deepseek-chat",
        "deepseek-coder",
        "deepseek-lite",
    ],
    "gemini": [
        "gemini-1.5-flash",
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.5-flash-lite-preview-06-17",
    ],
    "ollama": [
        "deepseek-r1:14b",
        "llama3",
        "llama3:8b",
        "llama3:70b",
        "mistral",
        "mixtral",
        "phi3",
        "qwen",
        "codellama",
    ],
}


def get_provider_defaults(name: str) -> ProviderDefaults:
    """根据名称获取 ProviderDefaults，名称区分大小写。"""

    try:
        return PROVIDER_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown provider: {name!r}") from None


def is_supported(name: str) -> bool:
    return name in PROVIDER_REGISTRY


def list_models(name: str) -> List[str]:
    """返回某 Provider 已知的模型 ID 列表。"""

    get_provider_defaults(name)
    return list(MODEL_LISTS.get(name, []))


def body_parameters(params: Mapping[str, Any]) -> Dict[str, Any]:
    """过滤掉协议元数据，只保留可以进入请求体的参数。"""

    return {k: v for k, v in params.items() if k not in PROTOCOL_KEYS}


def protocol_parameters(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if k in PROTOCOL_KEYS}
