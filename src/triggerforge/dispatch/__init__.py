"""Dispatch engine: the dispatcher and per-entity entry points."""

from triggerforge.dispatch.dispatcher import TriggerDispatcher
from triggerforge.dispatch.entry_point import ALL_EVENTS, TriggerEntryPoint

__all__ = ["ALL_EVENTS", "TriggerDispatcher", "TriggerEntryPoint"]
