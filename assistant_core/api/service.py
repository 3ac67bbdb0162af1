"""对外 API 服务模块。

整个查询管线的唯一入口：

    resolve -> transform -> build -> send -> parse

run_query() 返回带标签的 Success / Failure；query() 在最外层把结果渲染成一个字符串：
成功时是回答文本，失败时是以 "Error: " 开头的错误信息。
"""

from typing import Iterable, Optional, Union

from assistant_core.config.credentials import CredentialStore
from assistant_core.config.resolver import RawConfig, resolve
from assistant_core.config.settings import settings
from assistant_core.domain.conversation import MessageHistory, MessageLike, as_message
from assistant_core.domain.exceptions import BusinessError, InternalError
from assistant_core.domain.models import Failure, Outcome, Success
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.providers import create_handler
from assistant_core.providers.message_transformer import transform
from assistant_core.providers.request_builder import build
from assistant_core.providers.response_parser import parse


Messages = Union[MessageHistory, Iterable[MessageLike]]


def run_query(
    messages: Messages,
    raw_config: RawConfig = None,
    *,
    provider: Optional[str] = None,
    credentials: Optional[CredentialStore] = None,
    cfg=settings,
) -> Outcome:
    """执行一次查询，返回 Success(回答文本) 或 Failure(BusinessError)。

    Args:
        messages: MessageHistory，或 Message / dict 组成的有序序列。
        raw_config: 调用方配置（provider、model、provider_settings、features 等）。
        provider: 显式指定的 provider，优先级高于 raw_config["provider"]。
        credentials: 凭据存储，默认读取进程设置与 apikeys.yaml。
        cfg: 进程设置（超时、默认 provider）。
    """
    if isinstance(messages, MessageHistory):
        messages = messages.get_messages()

    try:
        msgs = [as_message(m) for m in messages]
        resolved = resolve(
            raw_config,
            provider,
            credentials=credentials,
            fallback_provider=cfg.default_provider,
        )
        transformed = transform(resolved.provider, msgs)
        body = build(resolved.provider, transformed, resolved)

        outcome = create_handler(resolved.provider, cfg).send(body, resolved)
        if isinstance(outcome, Failure):
            return outcome

        result = parse(resolved.provider, outcome.value)
    except BusinessError as e:
        return Failure(e)
    except Exception as e:
        logger.error(
            f"Unexpected error in query pipeline: {e}",
            exc_info=True,
            extra={"extra": {"error_type": type(e).__name__, "provider": provider}},
        )
        return Failure(InternalError(code="UNEXPECTED_ERROR", message=str(e) or type(e).__name__, http_status=500))

    if resolved.debug and isinstance(result, Success):
        logger.info(
            "Parsed response",
            extra={"extra": {"provider": resolved.provider, "model": resolved.model, "text": result.value}},
        )
    return result


def query(
    messages: Messages,
    raw_config: RawConfig = None,
    *,
    provider: Optional[str] = None,
    credentials: Optional[CredentialStore] = None,
    cfg=settings,
) -> str:
    """执行一次查询，返回回答文本或 "Error: ..." 字符串。"""
    outcome = run_query(messages, raw_config, provider=provider, credentials=credentials, cfg=cfg)
    if isinstance(outcome, Success):
        return outcome.value
    err = outcome.error
    logger.error(
        f"Query failed: {err.message}",
        extra={"extra": {
            "code": err.code,
            "kind": err.kind.value,
            "http_status": err.http_status,
            "provider": err.extra.get("provider"),
        }},
    )
    return outcome.render()
