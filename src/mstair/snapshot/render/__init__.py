"""
package: mstair.snapshot.render
"""

# <AUTOGEN_INIT>
from mstair.snapshot.render import (
    builtin_renderers,
    canonical,
    code_formatter,
    errors,
    metadata,
    model,
    reflection,
    renderer_registry,
    value_renderer,
)


__all__ = [
    "builtin_renderers",
    "canonical",
    "code_formatter",
    "errors",
    "metadata",
    "model",
    "reflection",
    "renderer_registry",
    "value_renderer",
]
# </AUTOGEN_INIT>
