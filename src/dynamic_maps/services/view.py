"""Request-scoped registry of the asset bundles and scripts a page must include."""

from __future__ import annotations

import logging

POS_HEAD = "head"
POS_BEGIN = "begin"
POS_END = "end"
POS_READY = "ready"
POS_LOAD = "load"

POSITIONS = (POS_HEAD, POS_BEGIN, POS_END, POS_READY, POS_LOAD)

logger = logging.getLogger(__name__)


class View:
    """Collects asset bundles and JS snippets registered while rendering a page."""

    def __init__(self) -> None:
        self.asset_bundles: list[str] = []
        self.js: dict[str, list[str]] = {position: [] for position in POSITIONS}

    def register_asset_bundle(self, name: str) -> None:
        if name in self.asset_bundles:
            return
        logger.debug("Registering asset bundle %s", name)
        self.asset_bundles.append(name)

    def register_js(self, js: str, position: str = POS_READY) -> None:
        if position not in self.js:
            raise ValueError(f"Unknown script position '{position}'.")
        snippets = self.js[position]
        if js not in snippets:
            snippets.append(js)

    def get_js(self, position: str = POS_END) -> list[str]:
        return list(self.js.get(position, []))

    def all_js(self) -> list[str]:
        return [snippet for position in POSITIONS for snippet in self.js[position]]
