"""Re-export typed models for the hecx SDK."""

from __future__ import annotations

from .invocation import InvocationMode, InvocationOptions, select_mode

__all__ = ["InvocationMode", "InvocationOptions", "select_mode"]
