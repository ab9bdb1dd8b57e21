"""Shared type definitions for glance."""

from typing import Literal

# Mode of operation
type GlanceMode = Literal["live", "static"]

# Change-detection strategy requested by the user
type WatchMode = Literal["auto", "native", "poll"]
