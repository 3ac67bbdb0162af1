"""API 密钥查找。

凭据按 provider id 存放，查找顺序：

1. 进程设置中的 ``<provider>_api_key`` 字段（环境变量 / .env / config.yaml）。
2. ``settings.api_keys_file`` 指向的 YAML 文件，格式为 ``provider: key``。

只读，多个查询可以并发使用同一个实例。
"""

from pathlib import Path
from typing import Dict, Optional, Protocol

import yaml

from assistant_core.config.settings import settings


class CredentialStore(Protocol):
    def get_api_key(self, provider: str) -> Optional[str]:
        ...


class ApiKeyStore:
    """基于进程设置与 apikeys.yaml 的凭据存储。"""

    def __init__(self, cfg=settings, keys_file: Optional[str | Path] = None):
        self._settings = cfg
        path = keys_file or getattr(cfg, "api_keys_file", None)
        self._keys_file = Path(path).expanduser() if path else None

    def get_api_key(self, provider: str) -> Optional[str]:
        key = getattr(self._settings, f"{provider}_api_key", None)
        if key:
            return key
        return self._file_keys().get(provider)

    def _file_keys(self) -> Dict[str, str]:
        if self._keys_file is None or not self._keys_file.exists():
            return {}
        data = yaml.safe_load(self._keys_file.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v}


default_credentials = ApiKeyStore()
