"""统一业务异常模型。

查询管线内部的所有错误都继承自 BusinessError：

- 各层按需抛出具体子类（ConfigError、TransportError 等）。
- Transport/Parser/Dispatcher 负责把异常包装成 Failure。
- 只有在最外层 query() 才调用 render() 转成 "Error: ..." 字符串。
"""

from enum import Enum


class ErrorKind(str, Enum):
    """错误种类，便于日志统计与调用方分支判断。"""

    CONFIG = "config"
    BUILD = "build"
    TRANSPORT = "transport"
    HTTP = "http"
    DECODE = "decode"
    SCHEMA = "schema"
    INTERNAL = "internal"


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息。
        http_status: 对应的 HTTP 状态码，默认 400。
        extra: 其他补充字段（例如 provider、raw 响应片段等）。
    """

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)

    def render(self) -> str:
        """渲染为对外统一的错误字符串。"""

        return f"Error: {self.message}"


class ConfigError(BusinessError):
    """Provider 不存在或缺少凭据，调用方需修正配置，不可重试。"""

    kind = ErrorKind.CONFIG


class BuildError(BusinessError):
    """无法为指定 Provider 构造请求体。"""

    kind = ErrorKind.BUILD


class TransportError(BusinessError):
    """网络层错误，例如 DNS/连接/TLS 失败、超时等。"""

    kind = ErrorKind.TRANSPORT


class ApiError(BusinessError):
    """第三方 API 返回 HTTP >= 400 时抛出。"""

    kind = ErrorKind.HTTP


class RateLimitError(ApiError):
    """Provider 限流（429），是否重试由调用方决定。"""


class DecodeError(BusinessError):
    """响应体为空或不是合法 JSON。"""

    kind = ErrorKind.DECODE


class SchemaError(BusinessError):
    """JSON 可解析，但不符合该 Provider 已知的成功/错误结构。

    部分 Provider 会在 HTTP 200 中返回 error 结构，同样归为此类。
    """

    kind = ErrorKind.SCHEMA


class InternalError(BusinessError):
    """管线内部未预期的异常，按原信息包装后返回给调用方。"""

    kind = ErrorKind.INTERNAL
