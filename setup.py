from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


def read_requirements() -> list[str]:
    requirements_file = Path("requirements.txt")
    if not requirements_file.exists():
        return []
    return [line.strip() for line in requirements_file.read_text(encoding="utf-8").splitlines() if line.strip()]


def build_extras() -> dict[str, list[str]]:
    base: dict[str, set[str]] = {
        "cloud": {
            "elevenlabs",
        },
        "test": {
            "pytest",
            "elevenlabs",
        },
    }

    extras_sets = dict(base)
    full = set().union(*extras_sets.values())
    extras_sets["full"] = full
    extras_sets["all"] = full

    return {name: sorted(packages) for name, packages in extras_sets.items()}


setup(
    name="voice_tools",
    version="0.1.0",
    packages=find_packages(include=["voice_tools", "voice_tools.*"]),
    description="Command line text-to-speech and speech-to-text tools (SoX, whisper.cpp, ElevenLabs)",
    long_description=Path("README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require=build_extras(),
    entry_points={
        "console_scripts": [
            "stt=voice_tools.presentation.stt_cli:main",
            "tts=voice_tools.presentation.tts_cli:main",
        ],
    },
    include_package_data=True,
)
