# File: src/mstair/snapshot/render/renderer_registry.py
"""
Type-keyed store of render functions.

A `RendererRegistry` maps a concrete type to a `RendererEntry`. The built-in
defaults are ordinary entries, so a user registration for the same type replaces
them, and registering the original entry again restores them.

Mutations and lookups each hold the registry lock for a single dictionary
operation only. A render call takes one `snapshot()` at entry and reads only that
read-only view afterwards, so registrations made while it runs do not affect it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from mstair.snapshot.base.types import qualified_type_name
from mstair.snapshot.render.model import RendererEntry, RenderFn
from mstair.snapshot.xlogging import create_logger


__all__ = [
    "RendererRegistry",
    "get_default_registry",
]

LOG = create_logger(__name__)

_default_registry: RendererRegistry | None = None
_default_registry_lock = threading.Lock()


class RendererRegistry:
    """Thread-safe mapping from exact type to render function."""

    def __init__(
        self,
        *,
        install_defaults: bool = True,
        entries: Iterable[RendererEntry] = (),
    ) -> None:
        """
        :param install_defaults: Install the built-in renderers before `entries`.
        :param entries: Additional entries registered in order; later ones win.
        """
        self._lock = threading.Lock()
        self._entries: dict[type, RendererEntry] = {}
        self._frozen: Mapping[type, RendererEntry] | None = None
        self._defaults_installed = False
        if install_defaults:
            self.install_defaults()
        for entry in entries:
            self.register_entry(entry)

    def __repr__(self) -> str:
        with self._lock:
            count = len(self._entries)
        return f"<{type(self).__name__} entries={count} defaults={self._defaults_installed}>"

    def __contains__(self, type_key: object) -> bool:
        with self._lock:
            return type_key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def register(
        self,
        type_key: type,
        render_fn: RenderFn,
        *,
        imports: Iterable[str] = (),
    ) -> RendererEntry | None:
        """
        Register `render_fn` for values whose exact type is `type_key`.

        The last registration for a type wins. Subclasses of `type_key` are not
        matched; register them separately.

        :param render_fn: `render_fn(value, context) -> expression text`.
        :param imports: Import statements the emitted text needs.
        :return: The entry that was replaced, if any, so callers can restore it.
        """
        if not isinstance(type_key, type):
            raise TypeError(f"type_key must be a type, got {type(type_key).__name__}")
        if not callable(render_fn):
            raise TypeError(f"render_fn must be callable, got {type(render_fn).__name__}")
        return self.register_entry(RendererEntry(type_key, render_fn, tuple(imports)))

    def register_entry(self, entry: RendererEntry) -> RendererEntry | None:
        """Register a prepared entry; see `register()`."""
        with self._lock:
            previous = self._entries.get(entry.type_key)
            self._entries[entry.type_key] = entry
            self._frozen = None
        LOG.debug(
            "registered renderer for %s%s",
            qualified_type_name(entry.type_key),
            " (replacing previous)" if previous is not None else "",
        )
        return previous

    def unregister(self, type_key: type) -> RendererEntry | None:
        """Remove the entry for `type_key`, returning it, or None if absent."""
        with self._lock:
            previous = self._entries.pop(type_key, None)
            if previous is not None:
                self._frozen = None
        if previous is not None:
            LOG.debug("unregistered renderer for %s", qualified_type_name(type_key))
        return previous

    def lookup(self, type_key: type) -> RenderFn | None:
        """Return the render function registered for exactly `type_key`, or None."""
        entry = self.entry_for(type_key)
        return entry.render_fn if entry is not None else None

    def entry_for(self, type_key: type) -> RendererEntry | None:
        with self._lock:
            return self._entries.get(type_key)

    def snapshot(self) -> Mapping[type, RendererEntry]:
        """
        Return a read-only view of the current entries.

        The view is a copy; later registrations produce a new view and never change
        one already handed out.
        """
        with self._lock:
            if self._frozen is None:
                self._frozen = MappingProxyType(dict(self._entries))
            return self._frozen

    def install_defaults(self) -> bool:
        """
        Install the built-in renderers once.

        Entries already registered for a built-in type are kept, so calling this
        after user registrations never undoes them.

        :return: True if the defaults were installed by this call.
        """
        from mstair.snapshot.render.builtin_renderers import DEFAULT_ENTRIES

        with self._lock:
            if self._defaults_installed:
                return False
            self._defaults_installed = True
            for entry in DEFAULT_ENTRIES:
                self._entries.setdefault(entry.type_key, entry)
            self._frozen = None
        LOG.debug("installed %d built-in renderers", len(DEFAULT_ENTRIES))
        return True

    def reset(self) -> None:
        """Drop every entry, then install the built-in renderers again."""
        with self._lock:
            self._entries.clear()
            self._frozen = None
            self._defaults_installed = False
        self.install_defaults()


def get_default_registry() -> RendererRegistry:
    """Return the process-wide registry used when no registry is passed explicitly."""
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = RendererRegistry()
    return _default_registry


# End of file: src/mstair/snapshot/render/renderer_registry.py
