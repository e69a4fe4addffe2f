"""
package: mstair.snapshot
"""

# <AUTOGEN_INIT>
from mstair.snapshot import (
    base,
    render,
    snapshot_api,
    snapshot_config,
    xlogging,
)
from mstair.snapshot.render.code_formatter import CodeFormatter, format_code
from mstair.snapshot.render.errors import (
    FormattingFailure,
    IOFailure,
    OverwriteDisallowed,
    ReflectionFailure,
    SnapshotError,
    UnsupportedType,
)
from mstair.snapshot.render.metadata import (
    Hash,
    Mask,
    SnapshotField,
    snapshot_exportable,
    snapshot_field,
)
from mstair.snapshot.render.model import (
    Expression,
    FieldSegment,
    FormatProfile,
    IndentStyle,
    IndexSegment,
    KeySegment,
    LineEnding,
    RenderContext,
    RendererEntry,
    RenderOptions,
)
from mstair.snapshot.render.renderer_registry import RendererRegistry, get_default_registry
from mstair.snapshot.render.value_renderer import RenderResult
from mstair.snapshot.snapshot_api import (
    export_snapshot,
    generate_source,
    render_value,
    resolve_output_dir,
    sanitize_variable_name,
)
from mstair.snapshot.snapshot_config import ConfigSnapshot, SnapshotConfig, get_default_config


__all__ = [
    "CodeFormatter",
    "ConfigSnapshot",
    "Expression",
    "FieldSegment",
    "FormatProfile",
    "FormattingFailure",
    "Hash",
    "IOFailure",
    "IndentStyle",
    "IndexSegment",
    "KeySegment",
    "LineEnding",
    "Mask",
    "OverwriteDisallowed",
    "ReflectionFailure",
    "RenderContext",
    "RenderOptions",
    "RenderResult",
    "RendererEntry",
    "RendererRegistry",
    "SnapshotConfig",
    "SnapshotError",
    "SnapshotField",
    "UnsupportedType",
    "base",
    "export_snapshot",
    "format_code",
    "generate_source",
    "get_default_config",
    "get_default_registry",
    "render",
    "render_value",
    "resolve_output_dir",
    "sanitize_variable_name",
    "snapshot_api",
    "snapshot_config",
    "snapshot_exportable",
    "snapshot_field",
    "xlogging",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
