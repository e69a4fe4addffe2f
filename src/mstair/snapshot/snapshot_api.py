# File: src/mstair/snapshot/snapshot_api.py
"""
Public entry points: render a value, assemble a fixture module, write it to disk.

Example:

    >>> from mstair.snapshot import generate_source
    >>> print(generate_source({"b": 1, "a": 2}, "scores"), end="")
    scores: dict = {
        "a": 2,
        "b": 1,
    }

Every call takes one snapshot of the configuration and of the renderer registry
when it starts; nothing it reads afterwards can be changed by another thread.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from mstair.snapshot.base.caller_info import caller_source_file
from mstair.snapshot.base.constants import (
    DEFAULT_SNAPSHOT_DIRNAME,
    K_SNAPSHOT_ROOT,
    SNAPSHOT_FILE_SUFFIX,
)
from mstair.snapshot.base.fs_helpers import fs_load_dotenv, fs_write_text_atomic
from mstair.snapshot.base.string_helpers import to_identifier
from mstair.snapshot.base.types import StrPath
from mstair.snapshot.render.code_formatter import CodeFormatter
from mstair.snapshot.render.errors import IOFailure, OverwriteDisallowed
from mstair.snapshot.render.model import RendererEntry, RenderOptions
from mstair.snapshot.render.renderer_registry import RendererRegistry, get_default_registry
from mstair.snapshot.render.value_renderer import RenderResult, ValueRenderer
from mstair.snapshot.snapshot_config import ConfigSnapshot, SnapshotConfig, get_default_config
from mstair.snapshot.xlogging import create_logger


__all__ = [
    "export_snapshot",
    "generate_source",
    "render_value",
    "resolve_output_dir",
    "sanitize_variable_name",
]

LOG = create_logger(__name__)

type RegistryArg = RendererRegistry | Mapping[type, RendererEntry] | None


def render_value(
    value: object,
    *,
    options: RenderOptions | None = None,
    registry: RegistryArg = None,
    config: SnapshotConfig | None = None,
) -> RenderResult:
    """
    Render `value` as a Python expression.

    :param options: Render options; defaults to the configuration's current options.
    :param registry: A registry, or a read-only mapping taken from one; defaults to
        the process-wide registry.
    :param config: Configuration to read options from when `options` is None.
    :return: The expression text and the imports it needs, plus its type annotation and
        the imports the annotation needs.
    :raises SnapshotError: If any part of the value cannot be rendered.
    """
    if options is None:
        options = (config or get_default_config()).get_render_options()
    return ValueRenderer(options=options, registry=_registry_view(registry)).render(value)


def generate_source(
    value: object,
    variable_name: str,
    *,
    header: str | None = None,
    context: str | None = None,
    config: SnapshotConfig | None = None,
    registry: RegistryArg = None,
) -> str:
    """
    Build the full text of a fixture module declaring `variable_name = <value>`.

    Layout: header comment, imports, documentation context comment, declaration.
    The result has passed through the code formatter with the configured profile.

    :param header: Header text; overrides the configured header for this call.
    :param context: Free text emitted as `#` comment lines above the declaration.
    """
    snap = (config or get_default_config()).snapshot()
    text, _ = _generate(value, variable_name, header, context, snap, registry)
    return text


def export_snapshot(
    value: object,
    variable_name: str,
    *,
    file_name: str | None = None,
    output_dir: StrPath | None = None,
    allow_overwrite: bool = True,
    header: str | None = None,
    context: str | None = None,
    config: SnapshotConfig | None = None,
    registry: RegistryArg = None,
) -> Path:
    """
    Render `value` and write it as a fixture module.

    The value is fully rendered and formatted before anything touches the disk, and
    the file is replaced atomically, so a failure never leaves a partial file behind.

    :param file_name: Target file name; `.py` is appended if missing. Defaults to
        `<TypeName>_<variable_name>.py`.
    :param output_dir: Directory to write to; see `resolve_output_dir()` for fallbacks.
    :param allow_overwrite: If False, an existing target raises `OverwriteDisallowed`.
    :return: Path of the written file.
    :raises OverwriteDisallowed: If the file exists and `allow_overwrite` is False.
    :raises IOFailure: If the directory cannot be created or the file cannot be written.
    """
    snap = (config or get_default_config()).snapshot()
    text, name = _generate(value, variable_name, header, context, snap, registry)

    directory = resolve_output_dir(output_dir, root_path=snap.root_path)
    if file_name is None:
        file_name = f"{to_identifier(type(value).__name__)}_{name}{SNAPSHOT_FILE_SUFFIX}"
    elif not file_name.endswith(SNAPSHOT_FILE_SUFFIX):
        file_name += SNAPSHOT_FILE_SUFFIX
    target = directory / file_name

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"cannot create directory {directory}: {exc}") from exc
    if not allow_overwrite and target.exists():
        raise OverwriteDisallowed(target)
    try:
        fs_write_text_atomic(target, text)
    except OSError as exc:
        raise IOFailure(f"cannot write {target}: {exc}") from exc

    LOG.info("snapshot %s written to %s", name, str(target))
    return target


def resolve_output_dir(
    output_dir: StrPath | None = None,
    *,
    root_path: Path | None = None,
) -> Path:
    """
    Choose the directory a snapshot is written to.

    Priority:
      1. `output_dir`, when given.
      2. `root_path`, the configured root.
      3. The `MSTAIR_SNAPSHOT_ROOT` environment variable (a `.env` file is honored).
      4. `__snapshots__` beside the calling source file, or beside the working
         directory when no source file is known.
    """
    if output_dir is not None:
        return Path(output_dir)
    if root_path is not None:
        return root_path
    fs_load_dotenv()
    env_root = os.environ.get(K_SNAPSHOT_ROOT)
    if env_root:
        return Path(env_root)
    caller = caller_source_file()
    base = caller.parent if caller is not None else Path.cwd()
    return base / DEFAULT_SNAPSHOT_DIRNAME


def sanitize_variable_name(name: str) -> str:
    """
    Turn arbitrary text into a valid Python identifier.

    Invalid characters become `_`; an empty or all-underscore result becomes `_`; a
    leading digit gets a `_` prefix; keywords and soft keywords get a `_` suffix.
    """
    return to_identifier(name)


# ---------- Assembly ----------


def _generate(
    value: object,
    variable_name: str,
    header: str | None,
    context: str | None,
    snap: ConfigSnapshot,
    registry: RegistryArg,
) -> tuple[str, str]:
    """Render and assemble one fixture module; returns the text and the variable name used."""
    renderer = ValueRenderer(options=snap.render_options, registry=_registry_view(registry))
    result = renderer.render(value)
    name = sanitize_variable_name(variable_name)

    lines: list[str] = []
    header_text = header if header is not None else snap.header
    if header_text:
        lines.extend(_comment_lines(header_text, keep_existing=True))
        lines.append("")
    imports = {*result.imports, *result.annotation_imports}
    if imports:
        lines.extend(_ordered_imports(imports))
        lines.append("")
    if context:
        lines.extend(_comment_lines(context))
    lines.append(f"{name}: {result.annotation} = {result.text}")

    text = CodeFormatter(snap.format_profile).format("\n".join(lines))
    return text, name


def _comment_lines(text: str, *, keep_existing: bool = False) -> list[str]:
    """
    Prefix each line of `text` with `# `; blank lines become a bare `#`.

    :param keep_existing: Leave lines that already start with `#` as they are.
    """
    lines: list[str] = []
    for line in text.splitlines():
        if not line.strip():
            lines.append("#")
        elif keep_existing and line.lstrip().startswith("#"):
            lines.append(line.strip())
        else:
            lines.append(f"# {line.rstrip()}")
    return lines


def _ordered_imports(imports: Iterable[str]) -> list[str]:
    """`import x` statements first, then `from x import y`, each group sorted."""
    return sorted(imports, key=lambda stmt: (stmt.startswith("from "), stmt))


def _registry_view(registry: RegistryArg) -> Mapping[type, RendererEntry]:
    if registry is None:
        return get_default_registry().snapshot()
    if isinstance(registry, RendererRegistry):
        return registry.snapshot()
    return registry


# End of file: src/mstair/snapshot/snapshot_api.py
