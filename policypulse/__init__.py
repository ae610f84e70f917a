"""
PolicyPulse package initializer

Keep this module lightweight. Do not import the API layer here, so the
runtime (codec, index, repository, projector) can be used without FastAPI.
"""

__all__ = []
