"""Conversion backends.

Provides:
- interface: BackendJob and the TranscodeBackend protocol
- native: export-session backend with sampled progress
- external: external command-line transcoder backend
- sampler: periodic progress sampling
"""

from convertbot.backends.external import ExternalToolBackend
from convertbot.backends.interface import BackendJob, ProgressCallback, TranscodeBackend
from convertbot.backends.native import NativeTranscodeBackend
from convertbot.backends.sampler import ProgressSampler

__all__ = [
    "BackendJob",
    "ExternalToolBackend",
    "NativeTranscodeBackend",
    "ProgressCallback",
    "ProgressSampler",
    "TranscodeBackend",
]
