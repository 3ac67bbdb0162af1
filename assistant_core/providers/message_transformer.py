"""把与 Provider 无关的消息列表转换成各厂商要求的结构。"""

from typing import Any, Dict, Iterable, List

from assistant_core.domain.conversation import MessageLike, as_message
from assistant_core.domain.exceptions import BuildError
from assistant_core.providers import create_handler, has_handler


def transform(provider: str, messages: Iterable[MessageLike]) -> List[Dict[str, Any]]:
    """按 provider 规则转换消息；空列表返回空列表。

    Raises:
        BuildError: provider 没有对应的转换规则。
    """

    if not has_handler(provider):
        raise BuildError(
            code="UNSUPPORTED_PROVIDER",
            message=f"Unsupported provider: {provider}",
            provider=provider,
        )
    return create_handler(provider).transform_messages([as_message(m) for m in messages])
