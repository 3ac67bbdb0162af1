"""请求体构造。

通用步骤：model + 消息字段 + 调参项；之后再交给各 Provider 的 finalize_body 做最后修改。
"""

from typing import Any, Dict, List

from assistant_core.domain.exceptions import BuildError
from assistant_core.domain.models import ResolvedConfig
from assistant_core.providers import create_handler, has_handler
from assistant_core.providers.registry import body_parameters


def build(provider: str, transformed: List[Dict[str, Any]], resolved: ResolvedConfig) -> Dict[str, Any]:
    """构造最终请求体。

    Raises:
        BuildError: provider 没有对应的 Handler，与 resolver 的校验保持一致。
    """

    if not has_handler(provider):
        raise BuildError(
            code="UNSUPPORTED_PROVIDER",
            message=f"Unsupported provider: {provider}",
            provider=provider,
        )
    handler = create_handler(provider)
    body: Dict[str, Any] = {
        "model": resolved.model,
        handler.messages_field: transformed,
    }
    # 协议元数据只走请求头
    body.update(body_parameters(resolved.additional_parameters))
    return handler.finalize_body(body, resolved)
