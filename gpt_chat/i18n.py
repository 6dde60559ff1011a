from typing import Dict

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "prompt-input": "Please enter what you want to chat with GPT about.",
        "too-many-images": "Only one image per message is supported.",
        "unsupported-file-type": "Unsupported file type. Send a JPEG, PNG or GIF image.",
        "file-too-large": "The image is too large (max 10 MB).",
        "download-error": "Failed to download the image, please try again later.",
        "model-error": "Error while calling the OpenAI API, please try again later.",
        "voice-error": "Voice synthesis failed, the text reply is above.",
    },
    "ru": {
        "prompt-input": "Напиши, о чём хочешь поговорить с GPT.",
        "too-many-images": "Поддерживается только одно изображение в сообщении.",
        "unsupported-file-type": "Неподдерживаемый тип файла. Пришли JPEG, PNG или GIF.",
        "file-too-large": "Изображение слишком большое (максимум 10 МБ).",
        "download-error": "Не удалось скачать изображение, попробуй позже.",
        "model-error": "Ошибка при обращении к OpenAI API, попробуй позже.",
        "voice-error": "Не удалось озвучить ответ, текст выше.",
    },
    "zh": {
        "prompt-input": "请输入您想与 GPT 聊天的内容。",
        "too-many-images": "每条消息只支持一张图片。",
        "unsupported-file-type": "不支持的文件类型，请发送 JPEG、PNG 或 GIF 图片。",
        "file-too-large": "图片太大（最大 10 MB）。",
        "download-error": "图片下载失败，请稍后再试。",
        "model-error": "调用 OpenAI API 时出错，请稍后再试。",
        "voice-error": "语音合成失败，文字回复见上。",
    },
}


def text(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Look up a message, falling back to English and then to the key itself."""
    table = MESSAGES.get((locale or "").split("-", 1)[0].lower(), MESSAGES[DEFAULT_LOCALE])
    return table.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
