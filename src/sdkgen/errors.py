from __future__ import annotations


class SdkgenError(Exception):
    """Base class for all errors raised by sdkgen."""


class SpecError(SdkgenError):
    """The OpenAPI document cannot be processed."""


class UnsupportedVersionError(SpecError):
    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"Unsupported OpenAPI version: {version}. Only versions 3.0.x and 3.1.x are supported.")


class ReferenceCycleError(SpecError):
    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__(f"Circular $ref chain: {' -> '.join(chain)}")


class ConfigError(SdkgenError):
    """A configuration file or object is invalid."""
