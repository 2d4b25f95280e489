from __future__ import annotations  # Request and result types shared by adapters and the service

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class InlineBinary(BaseModel):  # Base64 file attached directly to a prompt
    model_config = ConfigDict(frozen=True)

    mime_type: str
    base64_data: str


class GenerationOptions(BaseModel):  # Caller-tunable knobs for one generation call
    model_config = ConfigDict(frozen=True)

    system_prompt: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    json_mode: bool = False
    inline_binary: Optional[InlineBinary] = None


class GenerationRequest(BaseModel):  # Immutable per-call request handed to an adapter
    model_config = ConfigDict(frozen=True)

    prompt: str
    system_prompt: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    json_mode: bool = False
    inline_binary: Optional[InlineBinary] = None

    @classmethod
    def build(cls, prompt: str, options: Optional[GenerationOptions] = None, *, json_mode: bool = False) -> "GenerationRequest":
        opts = options or GenerationOptions()
        return cls(
            prompt=prompt,
            system_prompt=opts.system_prompt,
            temperature=opts.temperature,
            max_tokens=opts.max_tokens,
            json_mode=json_mode or opts.json_mode,
            inline_binary=opts.inline_binary,
        )


class GenerationResult(BaseModel, Generic[T]):  # Tagged outcome; check success before reading data
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    provider_used: str


__all__ = ["GenerationOptions", "GenerationRequest", "GenerationResult", "InlineBinary"]
