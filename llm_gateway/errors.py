from __future__ import annotations  # Generation error taxonomy


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class ProviderError(LlmGatewayError):  # Transport, auth, rate-limit or malformed-envelope failure
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message


class ParseError(ProviderError):  # Backend text was not the JSON the caller required
    def __init__(self, provider: str, message: str, raw: str = "") -> None:
        super().__init__(provider, message)
        self.raw = raw


class CapabilityError(LlmGatewayError):  # Adapter asked for something it structurally cannot do
    def __init__(self, provider: str, capability: str) -> None:
        super().__init__(f"{provider} does not support {capability}")
        self.provider = provider
        self.capability = capability


class ConfigurationError(LlmGatewayError):  # Required provider configuration missing
    pass


__all__ = ["CapabilityError", "ConfigurationError", "LlmGatewayError", "ParseError", "ProviderError"]
