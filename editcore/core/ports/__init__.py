# editcore: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from editcore.core.ports.surface import (
    IMAGE_KIND,
    LINK_KIND,
    TEXT_KIND,
    HostSurfacePort,
    NodeNotFoundError,
    NodeRef,
    RawSelection,
    SurfaceError,
)

__all__ = [
    # Host surface
    "HostSurfacePort",
    "NodeNotFoundError",
    "NodeRef",
    "RawSelection",
    "SurfaceError",
    "IMAGE_KIND",
    "LINK_KIND",
    "TEXT_KIND",
]
