"""
Tests for HatTokenMap — Hats kept current across editor changes

These tests validate:
- Scheduled allocations use the editor state captured at schedule time
- Only the latest scheduled request runs
- Previous hats feed stability on the next cycle
- Renderer hand-off and configuration reload
"""

import threading

import pytest

from hatter.config import Config, HatsConfig
from hatter.core.geometry import Selection
from hatter.services.hat_map import HatTokenMap


class RecordingRenderer:
    def __init__(self):
        self.calls = []
        self.painted = threading.Event()

    def set_hats(self, token_hats):
        self.calls.append(token_hats)
        self.painted.set()


@pytest.fixture
def renderer():
    return RecordingRenderer()


def _single(editor):
    return editor, [editor]


@pytest.fixture
def hat_map(renderer):
    service = HatTokenMap(Config(), renderer, delay=60)
    yield service
    service.dispose()


class TestScheduling:
    """Debounced allocation."""

    def test_snapshot_taken_at_schedule(self, hat_map, renderer, hat_factory):
        """Moving the cursor after schedule() does not affect the pending cycle."""
        editor = hat_factory.editor("foo bar", cursor=(0, 4))
        hat_map.schedule(editor, [editor])
        editor.primary_selection = Selection.cursor(0, 0)

        assert hat_map.flush() is True
        assert hat_map.cycles == 1
        assert renderer.calls[0][0].token.text == "bar"

    def test_latest_request_wins(self, hat_map, renderer, hat_factory):
        editor = hat_factory.editor("foo bar", cursor=(0, 0))
        hat_map.schedule(editor, [editor])
        editor.primary_selection = Selection.cursor(0, 4)
        hat_map.schedule(editor, [editor])

        hat_map.flush()
        assert hat_map.cycles == 1
        assert len(renderer.calls) == 1
        assert renderer.calls[0][0].token.text == "bar"

    def test_flush_without_schedule(self, hat_map):
        assert hat_map.flush() is False
        assert hat_map.cycles == 0

    def test_timer_delivers(self, renderer, hat_factory):
        service = HatTokenMap(Config(), renderer, delay=0.01)
        editor = hat_factory.editor("foo bar")
        service.schedule(editor, [editor])
        assert renderer.painted.wait(timeout=5)
        assert len(service.token_hats) == 2
        service.dispose()

    def test_schedule_after_dispose(self, hat_map, hat_factory):
        editor = hat_factory.editor("foo")
        hat_map.dispose()
        with pytest.raises(RuntimeError):
            hat_map.schedule(editor, [editor])


class TestRefresh:
    """Immediate allocation and continuity."""

    def test_refresh_returns_and_stores(self, hat_map, renderer, hat_factory):
        editor = hat_factory.editor("foo bar baz")
        hats = hat_map.refresh(editor, [editor])
        assert len(hats) == 3
        assert hat_map.token_hats == hats
        assert renderer.calls == [hats]

    def test_previous_hats_kept_when_stable(self, renderer, hat_factory):
        service = HatTokenMap(Config(hats=HatsConfig(stability="stable")), renderer, delay=60)
        editor = hat_factory.editor("foo bar baz qux")
        before = service.refresh(editor, [editor])
        editor.primary_selection = Selection.cursor(0, 12)
        after = service.refresh(editor, [editor])

        assert {h.token.key: h.key for h in after} == {h.token.key: h.key for h in before}
        service.dispose()

    @pytest.mark.parametrize("stability", ["stable", "balanced"])
    def test_hats_follow_tokens_shifted_by_edit(self, renderer, hat_factory, stability):
        """Growing one token keeps the hats of the tokens after it on the line."""
        service = HatTokenMap(Config(hats=HatsConfig(stability=stability)), renderer, delay=60)
        before = service.refresh(*_single(hat_factory.editor("a a a a x a a a a", cursor=(0, 8), editor_id="e")))
        after = service.refresh(*_single(hat_factory.editor("a a a a xy a a a a", cursor=(0, 10), editor_id="e")))

        def unedited(hats):
            ordered = sorted(hats, key=lambda h: h.token.range.start.character)
            return [h.key for h in ordered if h.token.text == "a"]

        assert len(unedited(before)) == 8
        assert unedited(after) == unedited(before)
        service.dispose()

    def test_default_delay_from_config(self):
        """Without an explicit delay the configured debounce is used."""
        service = HatTokenMap(Config())
        assert service.stability.value == "balanced"
        service.dispose()


class TestReload:
    """Configuration changes."""

    def test_reload_changes_catalog(self, hat_map, hat_factory):
        hat_map.reload(Config(hats=HatsConfig(colors=["default"], shapes=["default"])))
        assert len(hat_map.hat_style_map) == 1

        editor = hat_factory.editor("a a")
        assert len(hat_map.refresh(editor, [editor])) == 1
