"""领域层模型与协议。

包含：
- models: 统一的 Message / ResolvedConfig / Success / Failure 模型。
- conversation: 会话消息历史 MessageHistory。
- exceptions: 业务异常类型定义。
"""
