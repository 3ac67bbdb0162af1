"""单次查询配置的合并与校验。

优先级：显式 provider 覆盖 > 调用方配置 > Provider 默认值。
resolve() 是纯函数：先深拷贝调用方配置，再在副本上补齐默认值，
绝不修改传入的对象；每次调用都返回新的 ResolvedConfig。
"""

import copy
from typing import Any, Dict, Mapping, Optional, Union

from assistant_core.config.credentials import CredentialStore, default_credentials
from assistant_core.domain.exceptions import ConfigError
from assistant_core.domain.models import ResolvedConfig
from assistant_core.providers.registry import (
    FALLBACK_PROVIDER,
    PROVIDER_REGISTRY,
    body_parameters,
    get_provider_defaults,
    is_supported,
    protocol_parameters,
)


RawConfig = Union[Mapping[str, Any], ResolvedConfig, None]


def _to_raw(config: RawConfig) -> Dict[str, Any]:
    if isinstance(config, ResolvedConfig):
        return config.as_raw()
    return copy.deepcopy(dict(config or {}))


def merge_with_defaults(config: RawConfig, provider: Optional[str] = None) -> Dict[str, Any]:
    """把 Provider 默认值补进调用方配置的 provider_settings[provider]。

    - 调用方已有的键保留，缺失的键用默认值补齐。
    - additional_parameters 逐键合并；顶层 additional_parameters 优先级最高。
    - 顶层 model 总是覆盖 provider_settings 中的 model。
    """

    merged = _to_raw(config)
    provider = provider or merged.get("provider") or FALLBACK_PROVIDER
    if not is_supported(provider):
        raise ConfigError(
            code="UNSUPPORTED_PROVIDER",
            message=f"Unsupported provider: {provider}",
            provider=provider,
        )
    defaults = get_provider_defaults(provider)

    merged["provider"] = provider
    # YAML 中只写了键名的段落会被解析成 None
    all_settings = merged["provider_settings"] = dict(merged.get("provider_settings") or {})
    provider_settings = all_settings[provider] = dict(all_settings.get(provider) or {})

    provider_settings["provider"] = provider_settings.get("provider") or defaults.provider
    provider_settings["model"] = provider_settings.get("model") or defaults.model
    provider_settings["base_url"] = provider_settings.get("base_url") or defaults.base_url

    params = dict(defaults.additional_parameters)
    params.update(provider_settings.get("additional_parameters") or {})
    params.update(merged.get("additional_parameters") or {})
    provider_settings["additional_parameters"] = params

    if merged.get("model"):
        provider_settings["model"] = merged["model"]
    return merged


def resolve(
    raw_config: RawConfig = None,
    provider_override: Optional[str] = None,
    *,
    credentials: Optional[CredentialStore] = None,
    fallback_provider: str = FALLBACK_PROVIDER,
) -> ResolvedConfig:
    """合并配置并校验 Provider 与密钥，返回本次查询专用的 ResolvedConfig。

    Raises:
        ConfigError: provider 不受支持，或需要密钥的 provider 找不到密钥。
    """

    raw = _to_raw(raw_config)
    provider = provider_override or raw.get("provider") or fallback_provider
    merged = merge_with_defaults(raw, provider)
    provider_settings = merged["provider_settings"][provider]

    api_key = merged.get("api_key") or (credentials or default_credentials).get_api_key(provider)
    if not api_key and PROVIDER_REGISTRY[provider].requires_api_key:
        raise ConfigError(
            code="MISSING_API_KEY",
            message=f"No API key found for provider {provider}",
            provider=provider,
        )

    params = provider_settings["additional_parameters"]
    return ResolvedConfig(
        provider=provider,
        model=provider_settings["model"],
        base_url=merged.get("base_url") or provider_settings["base_url"],
        api_key=api_key or None,
        additional_parameters=body_parameters(params),
        protocol_parameters=protocol_parameters(params),
        features=dict(merged.get("features") or {}),
    )


def model_info(config: RawConfig) -> str:
    """返回某份配置实际会使用的模型名，用于给助手消息打标。"""

    if config is None:
        return "default"
    raw = _to_raw(config)
    provider = raw.get("provider")
    all_settings = raw.get("provider_settings")
    provider_settings = all_settings.get(provider) if isinstance(all_settings, dict) else None
    if not isinstance(provider_settings, dict):
        provider_settings = {}
    if provider_settings.get("model"):
        return provider_settings["model"]
    if raw.get("model"):
        return raw["model"]
    if provider in PROVIDER_REGISTRY:
        return get_provider_defaults(provider).model
    return "default"
