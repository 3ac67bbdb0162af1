"""Provider 抽象接口与共享的 HTTP 传输逻辑。

上层 Dispatcher 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 Handler（如 AnthropicClient）。
- 负责：消息格式转换、请求体后处理、鉴权方式，以及响应 JSON 的成功/错误路径解析。

HTTP 发送与结果分类（连接失败 / 空响应 / 非法 JSON / HTTP 错误）在 BaseHandler 中统一实现，
各厂商只覆盖 URL、请求头与解析相关的钩子。
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import (
    ApiError,
    DecodeError,
    RateLimitError,
    TransportError,
)
from assistant_core.domain.models import Failure, Message, Outcome, ResolvedConfig, Success
from assistant_core.infrastructure.logging.logger import logger


INVALID_BODY_EXCERPT = 100


class ProviderHandler(Protocol):
    """Provider Handler 协议。

    实现者需要提供：
    - name: provider id，用于查找与日志。
    - label: 错误信息中展示的名称（如 "OpenAI"）。
    - messages_field: 请求体中放消息列表的字段名。
    - transform_messages / finalize_body: 构造请求体。
    - send: 执行一次 HTTP 交换并分类结果。
    - extract_error / extract_text: 解析错误与成功路径。
    """

    name: str
    label: str
    messages_field: str

    def transform_messages(self, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        ...

    def finalize_body(self, body: Dict[str, Any], resolved: ResolvedConfig) -> Dict[str, Any]:
        ...

    def send(self, body: Dict[str, Any], resolved: ResolvedConfig) -> Outcome:
        ...

    def extract_error(self, data: Mapping[str, Any]) -> Optional[str]:
        ...

    def extract_text(self, data: Mapping[str, Any]) -> Optional[str]:
        ...


class BaseHandler:
    """共享的 Handler 实现，默认行为即 OpenAI 兼容协议。"""

    name = ""
    label = ""
    messages_field = "messages"

    def __init__(self, cfg=settings):
        self._settings = cfg

    # ---- 请求构造 ----

    def transform_messages(self, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in messages]

    def finalize_body(self, body: Dict[str, Any], resolved: ResolvedConfig) -> Dict[str, Any]:
        return body

    def build_url(self, resolved: ResolvedConfig) -> str:
        return resolved.base_url

    def build_headers(self, resolved: ResolvedConfig) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def build_params(self, resolved: ResolvedConfig) -> Dict[str, str]:
        return {}

    # ---- 传输 ----

    def send(self, body: Dict[str, Any], resolved: ResolvedConfig) -> Outcome:
        if resolved.debug:
            self._log_debug("Request body", resolved, body=body)
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    self.build_url(resolved),
                    json=body,
                    headers=self.build_headers(resolved),
                    params=self.build_params(resolved),
                )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            return Failure(
                TransportError(
                    code="NETWORK_ERROR",
                    message=f"Failed to connect to {self.label} API - {e}",
                    provider=self.name,
                )
            )
        if resolved.debug:
            self._log_debug("Raw response", resolved, status=resp.status_code, body=resp.text)
        return self.classify(resp.status_code, resp.text)

    def classify(self, status_code: int, text: str) -> Outcome:
        """把一次 HTTP 交换的原始结果分类为 Success(dict) 或 Failure。"""

        if not text or not text.strip():
            return Failure(
                DecodeError(
                    code="EMPTY_RESPONSE",
                    message=f"Empty response from {self.label} API",
                    http_status=status_code,
                    provider=self.name,
                )
            )
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return Failure(
                DecodeError(
                    code="INVALID_JSON",
                    message=f"Invalid JSON response from {self.label} API: {text[:INVALID_BODY_EXCERPT]}",
                    http_status=status_code,
                    provider=self.name,
                )
            )
        if status_code >= 400:
            detail = self.extract_error(data) if isinstance(data, dict) else None
            error_cls = RateLimitError if status_code == 429 else ApiError
            return Failure(
                error_cls(
                    code="RATE_LIMIT" if status_code == 429 else "API_ERROR",
                    message=f"{self.label} API returned status {status_code}: {detail or 'Unknown error'}",
                    http_status=status_code,
                    provider=self.name,
                )
            )
        return Success(data)

    # ---- 响应解析 ----

    def extract_error(self, data: Mapping[str, Any]) -> Optional[str]:
        """error 对象中的 message 或 type；没有 error 字段时返回 None。"""

        error = data.get("error")
        if not error:
            return None
        if isinstance(error, dict):
            return error.get("message") or error.get("type") or json.dumps(error, ensure_ascii=False)
        return str(error)

    def extract_text(self, data: Mapping[str, Any]) -> Optional[str]:
        """choices[0].message.content；结构不匹配时返回 None。"""

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return None
        message = choices[0].get("message")
        if not isinstance(message, dict):
            return None
        return message.get("content") or ""

    def _log_debug(self, msg: str, resolved: ResolvedConfig, **fields: Any) -> None:
        logger.info(
            f"{self.label} {msg}",
            extra={"extra": {"provider": self.name, "model": resolved.model, **fields}},
        )
