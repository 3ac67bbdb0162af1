"""从各厂商的响应 JSON 中提取回答文本或错误信息。

顺序：先查错误结构，再走成功路径，都不匹配时返回带响应片段的诊断信息。
"""

import json
from typing import Any

from assistant_core.domain.exceptions import SchemaError
from assistant_core.domain.models import Failure, Outcome, Success
from assistant_core.providers import create_handler, has_handler


DIAGNOSTIC_EXCERPT = 200


def _excerpt(data: Any) -> str:
    try:
        text = json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        text = "Unable to encode response"
    return text[:DIAGNOSTIC_EXCERPT]


def parse(provider: str, data: Any) -> Outcome:
    if not has_handler(provider):
        return Failure(
            SchemaError(
                code="UNSUPPORTED_PROVIDER",
                message=f"No response parser found for provider: {provider}",
                provider=provider,
            )
        )
    handler = create_handler(provider)
    if isinstance(data, dict):
        error = handler.extract_error(data)
        if error:
            return Failure(SchemaError(code="PROVIDER_ERROR", message=error, provider=provider))
        text = handler.extract_text(data)
        if text is not None:
            return Success(text)
    return Failure(
        SchemaError(
            code="UNEXPECTED_FORMAT",
            message=f"Unexpected response format from {provider}. Response: {_excerpt(data)}",
            provider=provider,
        )
    )
