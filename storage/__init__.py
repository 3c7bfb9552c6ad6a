"""Uploaded asset storage."""

from .uploads import AssetStore, PUBLIC_PREFIX

__all__ = ["AssetStore", "PUBLIC_PREFIX"]
