from typing import Literal

from pydantic import BaseModel, Field


class PluginsConfig(BaseModel):
    enabled: bool = True
    names: list[str] = Field(default_factory=list)


class UrlpipeConfig(BaseModel):
    share_url: str = "https://tools.example.com/url"
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
