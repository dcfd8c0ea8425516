"""Presentation layer: the ``stt`` and ``tts`` command line entry points."""
