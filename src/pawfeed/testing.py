"""Testing utilities.

In-memory image sources that never touch the network. A gated source
holds every fetch until the test releases it, which is how tests make
rounds resolve out of order.

Example:
    >>> import asyncio
    >>> from pawfeed.models.base import SourceType
    >>> from pawfeed.testing import FakeImageSource
    >>> source = FakeImageSource(SourceType.PRIMARY)
    >>> items = asyncio.run(source.fetch_batch(3))
    >>> [item.url for item in items]
    ['https://images.dog.ceo/fake/0-0.jpg', 'https://images.dog.ceo/fake/0-1.jpg', 'https://images.dog.ceo/fake/0-2.jpg']
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from pawfeed.core.exceptions import UpstreamError
from pawfeed.models.base import SourceType
from pawfeed.models.item import FeedItem

DEFAULT_HOSTS = {
    SourceType.PRIMARY: "images.dog.ceo",
    SourceType.SECONDARY: "cdn2.thecatapi.com",
}


@dataclass
class FakeImageSource:
    """Image source yielding predictable URLs.

    The n-th call (0-based) yields ``https://<host>/fake/<n>-<i>.jpg`` so a
    test can tell which call an item came from with ``call_of()``.

    Args:
        source_type: Tag for produced items.
        name: Source name (default: "fake-<source_type>").
        items_per_batch: Fixed batch length; default honours ``count``.
        fail_with: Exception raised by every call instead of returning.
        gated: Hold each call until ``release()`` is called for it.
    """

    source_type: SourceType
    name: str = ""
    items_per_batch: int | None = None
    fail_with: Exception | None = None
    gated: bool = False
    calls: int = field(default=0, init=False)
    requested: list[int] = field(default_factory=list, init=False)
    _gates: list[asyncio.Event] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"fake-{self.source_type.value}"

    @property
    def host(self) -> str:
        return DEFAULT_HOSTS[self.source_type]

    async def initialize(self) -> None:
        """Nothing to set up."""

    async def close(self) -> None:
        """Release any held calls so nothing waits forever."""
        self.release_all()

    async def fetch_batch(self, count: int) -> list[FeedItem]:
        call = self.calls
        self.calls += 1
        self.requested.append(count)

        if self.gated:
            gate = asyncio.Event()
            self._gates.append(gate)
            await gate.wait()

        if self.fail_with is not None:
            raise self.fail_with

        n = count if self.items_per_batch is None else self.items_per_batch
        return [
            FeedItem(url=f"https://{self.host}/fake/{call}-{i}.jpg", source_type=self.source_type)
            for i in range(n)
        ]

    def release(self, call: int) -> None:
        """Let the given held call return."""
        self._gates[call].set()

    async def wait_until_called(self, n: int) -> None:
        """Yield to the loop until at least ``n`` calls have started."""
        while self.calls < n:
            await asyncio.sleep(0)

    def release_all(self) -> None:
        for gate in self._gates:
            gate.set()

    @staticmethod
    def call_of(item: FeedItem) -> int:
        """Index of the call that produced ``item``."""
        return int(item.url.rsplit("/", 1)[-1].split("-", 1)[0])


def failing_source(source_type: SourceType, message: str = "connection refused") -> FakeImageSource:
    """Source whose every call fails with UpstreamError."""
    name = f"broken-{source_type.value}"
    return FakeImageSource(
        source_type,
        name=name,
        fail_with=UpstreamError(message, source=name),
    )
