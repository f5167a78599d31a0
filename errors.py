# -*- coding: utf-8 -*-
"""
Error types shared by the loaders and the layout helpers.

DataLoadFailure is recoverable: a section that cannot load its data is
drawn empty. DegenerateInput marks a broken precondition and is never
caught by the page.
"""
from __future__ import annotations


class DataLoadFailure(Exception):
    """A dataset is missing, unreadable, or lacks a required field."""

    def __init__(self, resource: str, reason: str):
        super().__init__(f"dataset unavailable: {resource} ({reason})")
        self.resource = resource
        self.reason = reason


class DegenerateInput(ValueError):
    """Input a layout routine cannot place (empty domain, zero-sum pie...)."""
