from __future__ import annotations

from dataclasses import replace

import pygame
import pytest

from gardenforge.core.config import load_settings
from gardenforge.core.telemetry import GateTelemetry
from gardenforge.game import Game, default_deck
from gardenforge.systems.spawn_gate import IDLE
from tests.helpers.content import make_unit, roster_of


def _deck():
    return [
        make_unit("sprout", "N", cost=50),
        make_unit("rose", "R", cost=150),
        make_unit("oak", "SSR", cost=1500, spawn_cd=12000),
    ]


@pytest.fixture
def make_game():
    games = []

    def _make(**overrides) -> Game:
        settings = replace(load_settings(), telemetry=False, **overrides)
        g = Game(settings=settings, deck=_deck(), stage_label="stage_1", seed=11)
        games.append(g)
        return g

    yield _make
    for g in games:
        g.scene.exit()
    pygame.quit()


def _click(scene, rect: pygame.Rect) -> None:
    scene.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=rect.center, button=1))


def _button(scene, cid: str):
    return next(b for b in scene.deck_btns if b.arg.id == cid)


def test_default_deck_takes_cheapest() -> None:
    roster = roster_of(*[make_unit(f"u{i}", cost=c) for i, c in enumerate([500, 20, 300, 50, 10, 80])])
    assert [c.id for c in default_deck(roster)] == ["u4", "u1", "u3", "u5", "u2"]


def test_cheap_card_spawns_immediately(make_game) -> None:
    scene = make_game().scene
    assert scene.cost == 200
    _click(scene, _button(scene, "sprout").rect)
    assert scene.spawned == ["sprout"]
    assert scene.cost == 150
    assert scene.cooldowns["sprout"] == 2000
    assert scene.gate.state == IDLE

    # cooling down: a second click does nothing
    _click(scene, _button(scene, "sprout").rect)
    assert scene.spawned == ["sprout"]


def test_quiz_then_spawn_after_hold(make_game) -> None:
    scene = make_game().scene
    _click(scene, _button(scene, "rose").rect)
    assert scene.gate.is_active()

    scene.update(0.0)
    answer = scene.gate.session.challenge.answer
    btn = next(b for b in scene.choice_btns if b.arg == answer)
    _click(scene, btn.rect)

    scene.update(0.2)
    assert scene.spawned == []
    scene.update(0.21)
    assert scene.spawned == ["rose"]
    assert scene.cooldowns["rose"] > 0
    assert scene.choice_btns == []


def test_wrong_answer_costs_nothing(make_game) -> None:
    scene = make_game(pause_world_during_quiz=True).scene
    _click(scene, _button(scene, "rose").rect)
    scene.update(0.0)
    ch = scene.gate.session.challenge
    wrong = next(c for c in ch.choices if c != ch.answer)
    scene.gate.answer(wrong)

    scene.update(0.5)
    scene.update(0.5)
    assert scene.spawned == []
    assert scene.denied == ["rose"]
    assert scene.cooldowns.get("rose", 0) == 0


def test_world_pauses_only_when_configured(make_game) -> None:
    held = make_game(pause_world_during_quiz=True).scene
    _click(held, _button(held, "rose").rect)
    held.update(1.0)
    assert held.cost == 200

    running = make_game(pause_world_during_quiz=False).scene
    _click(running, _button(running, "rose").rect)
    running.update(1.0)
    assert running.cost == pytest.approx(300)


def test_clicks_on_deck_ignored_while_quiz_open(make_game) -> None:
    scene = make_game().scene
    _click(scene, _button(scene, "rose").rect)
    session = scene.gate.session
    _click(scene, _button(scene, "sprout").rect)
    assert scene.gate.session is session
    assert scene.spawned == []


def test_unaffordable_card_is_blocked(make_game) -> None:
    scene = make_game().scene
    _click(scene, _button(scene, "oak").rect)
    assert not scene.gate.is_active()
    scene.update(0.0)
    assert _button(scene, "oak").disabled


def test_toggle_math_mode_with_key(make_game) -> None:
    scene = make_game().scene
    scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_m))
    assert scene.gate.adaptive is False
    assert scene.btn_mode.text == "MATH OFF"
    _click(scene, _button(scene, "rose").rect)
    assert scene.spawned == ["rose"]


def test_number_keys_answer(make_game) -> None:
    scene = make_game().scene
    _click(scene, _button(scene, "rose").rect)
    idx = scene.gate.session.challenge.choices.index(scene.gate.session.challenge.answer)
    scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_1 + idx))
    scene.update(0.5)
    assert scene.spawned == ["rose"]


def test_exit_cancels_pending_spawn(make_game) -> None:
    scene = make_game().scene
    _click(scene, _button(scene, "rose").rect)
    scene.gate.answer(scene.gate.session.challenge.answer)
    scene.exit()
    scene.timers.tick(1.0)
    assert scene.spawned == []
    assert not scene.gate.is_active()


def test_draw_with_quiz_open(make_game) -> None:
    game = make_game()
    scene = game.scene
    _click(scene, _button(scene, "rose").rect)
    scene.update(0.0)
    scene.draw(game.screen)
    scene.gate.answer(scene.gate.session.challenge.answer)
    scene.draw(game.screen)


def test_loop_closes_telemetry_on_error(make_game, tmp_path, monkeypatch) -> None:
    g = make_game()
    g.telemetry = GateTelemetry(enabled=True, run_id="crash", out_dir=tmp_path)

    def boom(dt):
        raise RuntimeError("scene blew up")

    monkeypatch.setattr(g.scene, "update", boom)
    with pytest.raises(RuntimeError):
        g.loop()
    assert g.telemetry._events_fp is None
    assert (tmp_path / "gate_crash_sessions.csv").exists()
