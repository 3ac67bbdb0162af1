"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载进程级设置；
另外提供 load_assistant_config() 读取调用方的查询配置（configuration.yaml）。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_yaml_mapping(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        warnings.warn(f"Config file {path} is not a mapping, ignored")
        return {}
    return data


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载进程级设置（若存在）。"""
    candidates = []
    explicit = os.getenv("ASSISTANT_SETTINGS_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                return _read_yaml_mapping(path)
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class AssistantSettings(BaseSettings):
    """进程级设置（使用 Pydantic）。"""

    # ---- Provider 相关配置 ----
    default_provider: str = Field(
        default="anthropic",
        description="未指定 provider 时使用的 Provider 名称",
    )

    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API 密钥")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API 密钥")
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API 密钥")
    api_keys_file: Optional[str] = Field(
        default=None,
        description="按 provider 存放 API 密钥的 YAML 文件（apikeys.yaml）",
    )

    http_timeout: float = Field(default=60.0, ge=1.0, description="HTTP 超时时间（秒）")
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("anthropic_api_key", "openai_api_key", "deepseek_api_key", "gemini_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


def load_assistant_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """读取调用方的查询配置（provider / model / provider_settings / features）。

    查找顺序：显式 path > ASSISTANT_CONFIG_FILE 环境变量 > 当前目录下的
    configuration.yaml。找不到时返回空字典，由 resolver 回退到默认 Provider。
    """

    if path is None:
        explicit = os.getenv("ASSISTANT_CONFIG_FILE")
        path = Path(explicit).expanduser() if explicit else Path.cwd() / "configuration.yaml"
    path = Path(path)
    if not path.exists():
        return {}
    return _read_yaml_mapping(path)


settings = AssistantSettings()

Settings = AssistantSettings
