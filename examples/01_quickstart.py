#!/usr/bin/env python3
"""
PawFeed Quickstart Example

Loads the first page from dog.ceo and TheCatAPI, prefills as a renderer
with a very tall viewport would, switches to cats only and opens the
viewer on the first image.

Usage:
    python examples/01_quickstart.py
"""

import asyncio

from rich.console import Console
from rich.table import Table

from pawfeed import FilterMode, Gallery, get_settings

console = Console()


def show(title: str, gallery: Gallery) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("source")
    table.add_column("url")
    for i, item in enumerate(gallery.feed.feed[:8]):
        table.add_row(str(i), item.source_type.value, item.url)
    console.print(table)
    console.print(f"{len(gallery.feed.feed)} items, loading={gallery.feed.loading}")


async def main() -> None:
    """Scroll, filter and view."""
    settings = get_settings(log_format="console", log_level="INFO")

    async with Gallery(settings, setup_logging=True) as gallery:
        await gallery.feed.wait_idle()
        show("All animals", gallery)

        # A viewport that never becomes scrollable stops after prefill_cap loads
        while gallery.feed.maybe_prefill(viewport_is_scrollable=False):
            await gallery.feed.wait_idle()
        console.print(f"✓ Prefilled {gallery.feed.prefill_budget} extra pages")

        gallery.feed.set_filter(FilterMode.SECONDARY_ONLY)
        await gallery.feed.wait_idle()
        show("Cats only", gallery)

        if gallery.feed.feed:
            gallery.viewer.select(gallery.feed.feed[0])
            console.print(f"✓ Viewer {gallery.viewer.phase.value}: {gallery.viewer.selection.url}")
            gallery.viewer.request_close()
            await gallery.viewer.wait_closed()
            console.print(f"✓ Viewer {gallery.viewer.phase.value}")


if __name__ == "__main__":
    asyncio.run(main())
