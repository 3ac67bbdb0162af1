"""内置系统提示词。

按使用场景（高亮文本、单本书、多本书、通用对话、翻译）提供默认的 system prompt，
调用方可以通过 overrides 覆盖其中任意一项。提示词的编辑与存储不在本包范围内。
"""

from typing import Mapping, Optional


SYSTEM_PROMPTS = {
    "default": "You are a helpful assistant.",
    "highlight": (
        "You are a helpful reading assistant. The user has highlighted text from a book "
        "and wants help understanding or exploring it."
    ),
    "book": (
        "You are an AI assistant helping with questions about books. The user has selected "
        "a book from their library and wants to know more about it."
    ),
    "multi_book": (
        "You are an AI assistant helping analyze and compare multiple books. The user has "
        "selected several books from their library and wants insights about the collection."
    ),
    "general": (
        "You are a helpful AI assistant ready to engage in conversation, answer questions, "
        "and help with various tasks."
    ),
    "translation": (
        "You are a helpful translation assistant. Provide direct translations without "
        "additional commentary."
    ),
}

TRANSLATE_TEMPLATE = "Translate the following text to {language}: {text}"


def load_system_prompt(context: str = "default", overrides: Optional[Mapping[str, str]] = None) -> str:
    """返回某个场景的系统提示词，未知场景回退到 default。"""

    prompts = {**SYSTEM_PROMPTS, **(overrides or {})}
    return prompts.get(context) or prompts["default"]


def render_translation_prompt(text: str, language: str = "English") -> str:
    return TRANSLATE_TEMPLATE.format(language=language, text=text)
