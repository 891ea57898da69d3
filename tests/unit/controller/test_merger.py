"""Tests for pawfeed.merger."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from pawfeed.merger import merge
from pawfeed.models.base import SourceType
from pawfeed.models.item import FeedItem


def batch(source_type: SourceType, n: int, host: str) -> list[FeedItem]:
    return [FeedItem(url=f"https://{host}/{i}.jpg", source_type=source_type) for i in range(n)]


@pytest.fixture
def dogs() -> list[FeedItem]:
    return batch(SourceType.PRIMARY, 10, "images.dog.ceo")


@pytest.fixture
def cats() -> list[FeedItem]:
    return batch(SourceType.SECONDARY, 10, "cdn2.thecatapi.com")


class TestMerge:
    """Tests for merge()."""

    def test_empty(self) -> None:
        assert merge([]) == []
        assert merge([[], []]) == []

    def test_single_batch(self, dogs: list[FeedItem]) -> None:
        merged = merge([dogs], rng=random.Random(1))
        assert Counter(i.url for i in merged) == Counter(i.url for i in dogs)

    @pytest.mark.parametrize(("n_a", "n_b"), [(0, 0), (0, 3), (5, 0), (10, 10), (1, 17)])
    def test_is_permutation_of_concatenation(self, n_a: int, n_b: int) -> None:
        a = batch(SourceType.PRIMARY, n_a, "images.dog.ceo")
        b = batch(SourceType.SECONDARY, n_b, "cdn2.thecatapi.com")

        merged = merge([a, b], rng=random.Random(42))

        assert len(merged) == n_a + n_b
        assert sorted(i.url for i in merged) == sorted(i.url for i in a + b)

    def test_keeps_duplicates(self) -> None:
        item = FeedItem(url="https://images.dog.ceo/same.jpg", source_type=SourceType.PRIMARY)
        assert merge([[item, item], [item]]) == [item, item, item]

    def test_does_not_modify_inputs(self, dogs: list[FeedItem], cats: list[FeedItem]) -> None:
        dogs_before, cats_before = list(dogs), list(cats)
        merge([dogs, cats], rng=random.Random(3))
        assert dogs == dogs_before
        assert cats == cats_before

    def test_deterministic_for_seed(self, dogs: list[FeedItem], cats: list[FeedItem]) -> None:
        assert merge([dogs, cats], rng=random.Random(9)) == merge([dogs, cats], rng=random.Random(9))

    def test_sources_are_interleaved(self, dogs: list[FeedItem], cats: list[FeedItem]) -> None:
        """The first half is not simply one source."""
        for seed in range(5):
            merged = merge([dogs, cats], rng=random.Random(seed))
            first_half = {i.source_type for i in merged[:10]}
            assert first_half == {SourceType.PRIMARY, SourceType.SECONDARY}

    def test_accepts_generators(self, dogs: list[FeedItem]) -> None:
        merged = merge((b for b in [dogs[:2], dogs[2:4]]), rng=random.Random(0))
        assert len(merged) == 4
