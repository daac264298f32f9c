"""Live content reload."""

from contentnav.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
