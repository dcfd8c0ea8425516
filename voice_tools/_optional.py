"""Guards for the ElevenLabs SDK, which is only installed with the ``cloud`` extra."""

from __future__ import annotations

from importlib import import_module
from types import ModuleType

from voice_tools.errors import VoiceToolsError

CLOUD_EXTRA = "cloud"

# extra name -> distribution it pulls in
EXTRA_PACKAGES = {
    CLOUD_EXTRA: "elevenlabs",
}


class OptionalDependencyError(VoiceToolsError, ImportError):
    """
    A cloud feature was requested but its SDK is not importable.

    Being a `VoiceToolsError`, it is reported by the command line tools like
    any other failure (one ``Error:`` line, exit status 1).
    """

    def __init__(self, feature: str, extra: str = CLOUD_EXTRA) -> None:
        package = EXTRA_PACKAGES.get(extra, extra)
        super().__init__(
            f"{feature} needs the '{package}' package. "
            f"Install it with `pip install voice_tools[{extra}]`."
        )
        self.feature = feature
        self.extra = extra
        self.package = package


def optional_import(module: str, *, feature: str, extra: str = CLOUD_EXTRA) -> ModuleType:
    """Import ``module``, turning a missing SDK into `OptionalDependencyError`."""
    try:
        return import_module(module)
    except OptionalDependencyError:
        raise
    except ImportError as exc:
        raise OptionalDependencyError(feature, extra) from exc


def require_extra(feature: str, extra: str = CLOUD_EXTRA) -> None:
    raise OptionalDependencyError(feature, extra)


__all__ = ["CLOUD_EXTRA", "OptionalDependencyError", "optional_import", "require_extra"]
