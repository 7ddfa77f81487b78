"""Layout engines: rooted tree (folio / mindmap) and force-directed network."""

from .tree import RootedLayout, TreeNode, build_rooted_layout
from .force import ForceConfig, ForceLayout, ViewportState, mount_force_layout

__all__ = [
    "RootedLayout",
    "TreeNode",
    "build_rooted_layout",
    "ForceConfig",
    "ForceLayout",
    "ViewportState",
    "mount_force_layout",
]
