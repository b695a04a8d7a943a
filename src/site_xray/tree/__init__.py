"""Descriptor trees: classification, summarizing, parsing and rendering."""

from __future__ import annotations

from site_xray.tree.classifier import UNDEFINED, classify
from site_xray.tree.nodes import DataType, Descriptor
from site_xray.tree.parser import DataParser, ParseMode, SeenMap
from site_xray.tree.renderer import render
from site_xray.tree.sorting import natural_key, sort_alpha_num
from site_xray.tree.summarizer import Summary, summarize, truncate

__all__ = [
    "UNDEFINED",
    "DataParser",
    "DataType",
    "Descriptor",
    "ParseMode",
    "SeenMap",
    "Summary",
    "classify",
    "natural_key",
    "render",
    "sort_alpha_num",
    "summarize",
    "truncate",
]
