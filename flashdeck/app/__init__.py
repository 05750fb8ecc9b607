"""Application bootstrap helpers for the Flashdeck project."""

from .runtime import run_report
from .settings import AppSettings

__all__ = ["run_report", "AppSettings"]
