"""Scoring value types."""

from .slot import Slot, SlotKey, SlotOutcome, SlotScore

__all__ = ["Slot", "SlotKey", "SlotOutcome", "SlotScore"]
