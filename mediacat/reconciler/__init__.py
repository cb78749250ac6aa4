"""Reconciler module for merging scanned and cataloged trees."""

from .merge import count_states, merge_directory, merge_file, merge_volume, merge_volumes

__all__ = [
    "count_states",
    "merge_directory",
    "merge_file",
    "merge_volume",
    "merge_volumes",
]
