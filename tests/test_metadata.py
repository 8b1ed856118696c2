"""Tests for the metadata signal (player/metadata.py)."""

from __future__ import annotations

import asyncio

import pytest

from player.metadata import MetadataCancelled, MetadataError, MetadataSignal, MetadataTimeoutError


@pytest.mark.asyncio
async def test_ready_before_wait():
    signal = MetadataSignal()
    signal.ready(12.5)
    assert await signal.wait(1.0) == 12.5


@pytest.mark.asyncio
async def test_first_signal_wins():
    signal = MetadataSignal()
    signal.ready(1.0)
    signal.error("late")
    assert signal.done
    assert await signal.wait(1.0) == 1.0


@pytest.mark.asyncio
async def test_error_signal_raises():
    signal = MetadataSignal()
    signal.error("decode failed")
    with pytest.raises(MetadataError, match="decode failed"):
        await signal.wait(1.0)


@pytest.mark.asyncio
async def test_no_signal_is_a_timeout():
    with pytest.raises(MetadataTimeoutError):
        await MetadataSignal().wait(0.02)


@pytest.mark.asyncio
async def test_cancel_event_stops_waiting():
    signal = MetadataSignal()
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, cancel.set)
    with pytest.raises(MetadataCancelled):
        await signal.wait(5.0, cancel)
