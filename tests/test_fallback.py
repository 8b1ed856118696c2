"""Tests for degraded-mode sample data (player_core/fallback.py)."""

from __future__ import annotations

import pytest

from player_core.fallback import synthetic_bulk, synthetic_page


class TestSyntheticBulk:
    def test_exactly_100_songs_and_5_pages(self):
        result = synthetic_bulk()
        assert len(result.songs) == 100
        assert [s.id for s in result.songs] == list(range(1, 101))
        assert result.total_pages == 5

    def test_deterministic(self):
        assert synthetic_bulk() == synthetic_bulk()

    def test_every_song_is_playable(self):
        assert all(s.url for s in synthetic_bulk().songs)


class TestSyntheticPage:
    @pytest.mark.parametrize("page, page_size", [(1, 60), (3, 10), (7, 1)])
    def test_two_song_single_page(self, page, page_size):
        result = synthetic_page(page, page_size)
        assert len(result.songs) == 2
        assert result.code == 200
        assert result.pagination.model_dump() == {
            "page": page,
            "page_size": page_size,
            "total": 2,
            "total_pages": 1,
            "has_next": False,
            "has_prev": False,
        }

    def test_playlist_id_passed_through(self):
        assert synthetic_page(1, 60, playlist_id=2619366284).playlist_id == 2619366284
