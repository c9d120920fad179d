"""
WeCom group robot wire DTOs.

WeComRobotMessage:  request body  {"msgtype": "text", "text": {"content": ...}}
WeComRobotResponse: response body {"errcode": int, "errmsg": str}

See https://developer.work.weixin.qq.com/document/path/90313
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextContent(BaseModel):
    content: str


class WeComRobotMessage(BaseModel):
    """Outbound text message. Built fresh for every delivery attempt."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message_type: Literal["text"] = Field(default="text", alias="msgtype")
    text: TextContent

    @classmethod
    def text_message(cls, content: str) -> "WeComRobotMessage":
        return cls(text=TextContent(content=content))

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class WeComRobotResponse(BaseModel):
    """
    Robot API reply. Absent or null fields decode to their zero values, so an
    empty object (or a bare ``null``) counts as success. Types are checked
    strictly: ``{"errcode": "0"}`` is a decode error, not a success.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", strict=True)

    code: int = Field(default=0, alias="errcode")
    error: str = Field(default="", alias="errmsg")

    @model_validator(mode="before")
    @classmethod
    def _null_is_zero_value(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @property
    def ok(self) -> bool:
        return self.code == 0
