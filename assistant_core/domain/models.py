"""统一的消息、配置与结果数据模型。

本模块定义查询管线在不同 Provider 之间共享的标准数据结构：

- Message: 一条对话消息（system/user/assistant）。
- ResolvedConfig: 单次查询使用的、已合并默认值的配置。
- Success / Failure: 管线各阶段统一的结果类型。

所有 Provider 适配器都只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Literal, Mapping, Optional, TypeVar, Union

from assistant_core.domain.exceptions import BusinessError


# 消息角色类型（与各厂商的 role 字段对应，由 transformer 负责映射）
Role = Literal["system", "user", "assistant"]

T = TypeVar("T")


@dataclass
class Message:
    """一条对话消息。

    - role: 消息角色，system/user/assistant。
    - content: 纯文本内容。
    - is_context: 是否为自动注入的背景消息（如高亮文本），而非用户输入。
    """

    role: Role
    content: str
    is_context: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.is_context:
            payload["is_context"] = True
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        return cls(
            role=data.get("role") or "user",
            content=data.get("content") or "",
            is_context=bool(data.get("is_context", False)),
        )


@dataclass(frozen=True)
class ResolvedConfig:
    """单次查询的完整配置，由 resolver 每次调用重新构造。

    - additional_parameters: 会进入请求体的调参项（temperature、max_tokens 等）。
    - protocol_parameters: 只给 Transport 层用的协议元数据（如 anthropic_version），
      永远不会写进请求体。
    - features: 功能开关，目前 Transport 只关心 debug。
    """

    provider: str
    model: str
    base_url: str
    api_key: Optional[str] = None
    additional_parameters: Dict[str, Any] = field(default_factory=dict)
    protocol_parameters: Dict[str, Any] = field(default_factory=dict)
    features: Dict[str, Any] = field(default_factory=dict)

    @property
    def debug(self) -> bool:
        return bool(self.features.get("debug", False))

    def as_raw(self) -> Dict[str, Any]:
        """还原为原始配置结构，便于再次 resolve 或持久化。"""

        params = copy.deepcopy(self.additional_parameters)
        params.update(copy.deepcopy(self.protocol_parameters))
        raw: Dict[str, Any] = {
            "provider": self.provider,
            "model": self.model,
            "base_url": self.base_url,
            "provider_settings": {
                self.provider: {
                    "model": self.model,
                    "base_url": self.base_url,
                    "additional_parameters": params,
                }
            },
            "features": copy.deepcopy(self.features),
        }
        if self.api_key:
            raw["api_key"] = self.api_key
        return raw


@dataclass(frozen=True)
class Success(Generic[T]):
    """成功结果：value 可以是解析后的 JSON，也可以是最终回答文本。"""

    value: T


@dataclass(frozen=True)
class Failure:
    """失败结果，携带结构化的 BusinessError。"""

    error: BusinessError

    @property
    def message(self) -> str:
        return self.error.message

    def render(self) -> str:
        return self.error.render()


Outcome = Union[Success, Failure]
