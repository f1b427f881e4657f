# tests/utils/__init__.py

from .patch_everywhere import patch_everywhere
from .trace import TRACE, make_trace
from .workspace import (
    TOOL_MANIFEST,
    USER_MANIFEST,
    BundlerCall,
    FakeBundler,
    make_options,
    make_tool_project,
    make_user_project,
    write_json,
)

__all__ = [
    "TOOL_MANIFEST",
    "TRACE",
    "USER_MANIFEST",
    "BundlerCall",
    "FakeBundler",
    "make_options",
    "make_tool_project",
    "make_trace",
    "make_user_project",
    "patch_everywhere",
    "write_json",
]
