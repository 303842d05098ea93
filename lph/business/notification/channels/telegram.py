"""
Telegram Channel - Telegram 推送渠道

通过 Bot API sendMessage 推送纯文本消息。
超过单条长度上限的消息按行拆分为多条依次发送。
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from lph.business.notification.channels.base import (
    NotificationChannel,
    SendResult,
    SendStatus,
)

logger = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"

# Bot API 单条上限 4096，留出余量
TELEGRAM_MAX_LEN = 3900


def split_long_message(text: str, max_len: int = TELEGRAM_MAX_LEN) -> list[str]:
    """按行拆分长消息

    单行超过 max_len 时硬切。

    Args:
        text: 原始文本
        max_len: 单条最大长度

    Returns:
        消息片段列表；空文本返回空列表
    """
    text = (text or "").strip()
    if not text:
        return []
    if len(text) <= max_len:
        return [text]

    parts: list[str] = []
    buf = ""
    for line in text.splitlines():
        while len(line) > max_len:
            if buf:
                parts.append(buf)
                buf = ""
            parts.append(line[:max_len])
            line = line[max_len:]

        candidate = f"{buf}\n{line}" if buf else line
        if len(candidate) <= max_len:
            buf = candidate
        else:
            parts.append(buf)
            buf = line

    if buf:
        parts.append(buf)
    return parts


@dataclass
class TelegramConfig:
    """Telegram 配置"""

    bot_token: str
    chat_id: str
    timeout: int = 10

    @classmethod
    def from_env(cls) -> "TelegramConfig":
        """从环境变量加载配置"""
        load_dotenv()
        return cls(
            bot_token=os.getenv("TELEGRAM_BOT_TOKEN", "").strip(),
            chat_id=os.getenv("TELEGRAM_CHAT_ID", "").strip(),
            timeout=int(os.getenv("TELEGRAM_TIMEOUT", "10")),
        )


class TelegramChannel(NotificationChannel):
    """Telegram 推送渠道

    使用方式：
        channel = TelegramChannel.from_env()
        result = channel.send("标题", "内容")
    """

    def __init__(
        self,
        config: TelegramConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> "TelegramChannel":
        """从环境变量创建"""
        return cls(TelegramConfig.from_env())

    @property
    def name(self) -> str:
        return "telegram"

    @property
    def is_available(self) -> bool:
        return bool(self.config.bot_token and self.config.chat_id)

    @property
    def endpoint(self) -> str:
        return f"{API_URL}/bot{self.config.bot_token}/sendMessage"

    def send(self, title: str, content: str, **kwargs: Any) -> SendResult:
        """发送文本消息

        标题与内容之间空一行；过长时拆分为多条，任一条失败即返回失败。

        Args:
            title: 消息标题
            content: 消息内容

        Returns:
            SendResult（成功时 message_id 为最后一条消息的 id）
        """
        if not self.is_available:
            return SendResult(
                status=SendStatus.FAILED,
                error="Telegram bot token or chat id not configured",
            )

        text = f"{title}\n\n{content}" if title else content
        parts = split_long_message(text)
        if not parts:
            return SendResult(status=SendStatus.FAILED, error="Empty message")

        result = SendResult(status=SendStatus.FAILED)
        for i, part in enumerate(parts):
            result = self._send_request({"chat_id": self.config.chat_id, "text": part})
            if not result.is_success:
                logger.warning(f"Telegram part {i + 1}/{len(parts)} failed: {result.error}")
                return result
        return result

    def _send_request(self, payload: dict[str, Any]) -> SendResult:
        """发送请求

        Args:
            payload: sendMessage 参数

        Returns:
            SendResult
        """
        try:
            response = self.session.post(
                self.endpoint,
                data=payload,
                timeout=self.config.timeout,
            )

            if response.status_code == 200:
                result = response.json()
                if result.get("ok"):
                    message_id = (result.get("result") or {}).get("message_id")
                    return SendResult(
                        status=SendStatus.SUCCESS,
                        message_id=str(message_id) if message_id is not None else None,
                    )
                return SendResult(
                    status=SendStatus.FAILED,
                    error=result.get("description", "Unknown error"),
                    details=result,
                )
            return SendResult(
                status=SendStatus.FAILED,
                error=f"HTTP {response.status_code}",
                details={"response": response.text[:500]},
            )

        except requests.Timeout:
            return SendResult(status=SendStatus.FAILED, error="Request timeout")
        except requests.RequestException as e:
            return SendResult(status=SendStatus.FAILED, error=str(e))
        except ValueError as e:
            logger.error(f"Telegram 响应解析失败: {e}")
            return SendResult(status=SendStatus.FAILED, error=f"Invalid response: {e}")
