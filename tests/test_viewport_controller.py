import pytest

from pulsechart.app.state.viewport_controller import ViewportController
from pulsechart.domain.exceptions import ValidationError
from pulsechart.domain.value_objects.viewport import (
    InteractionMode,
    ViewportAction,
    ViewportRange,
)


@pytest.fixture
def controller(scheduler, clock):
    return ViewportController(scheduler=scheduler, clock=clock, decay_seconds=30, right_offset=5)


class TestFirstLoad:
    def test_fit_all_and_auto_follow(self, controller):
        decision = controller.evaluate(100)
        assert decision.action is ViewportAction.FIT_ALL
        assert decision.visible_range == ViewportRange(0, 99)
        assert controller.mode is InteractionMode.AUTO_FOLLOW
        assert not controller.is_first_load

    def test_first_load_clears_previous_gesture(self, controller, scheduler):
        controller.mark_user_interaction("wheel")
        controller.evaluate(10)
        assert controller.mode is InteractionMode.AUTO_FOLLOW
        assert not scheduler.pending

    def test_empty_keeps(self, controller):
        assert controller.evaluate(0).action is ViewportAction.KEEP
        assert controller.is_first_load


class TestAutoFollow:
    def test_preserves_width_and_follows_latest(self, controller):
        controller.evaluate(100)
        controller.on_visible_range_changed(ViewportRange(40, 80))
        decision = controller.evaluate(101)
        assert decision.action is ViewportAction.FOLLOW_LATEST
        # ancho 40 → from = 100 - 40 + 5, to = 100 + 5
        assert decision.visible_range == ViewportRange(65, 105)

    def test_from_is_clamped_at_zero(self, controller):
        controller.evaluate(3)
        controller.on_visible_range_changed(ViewportRange(0, 50))
        decision = controller.evaluate(4)
        assert decision.visible_range.from_index == 0
        assert decision.visible_range.to_index == 3 + 5

    def test_no_prior_range_fits_all(self, controller):
        controller.evaluate(10)
        controller.on_visible_range_changed(None)
        assert controller.evaluate(11).action is ViewportAction.FIT_ALL


class TestUserControl:
    def test_gesture_keeps_range(self, controller):
        controller.evaluate(100)
        controller.on_visible_range_changed(ViewportRange(10, 30))
        controller.mark_user_interaction("pointer_down")
        decision = controller.evaluate(101)
        assert decision.action is ViewportAction.KEEP
        assert controller.visible_range == ViewportRange(10, 30)

    def test_decay_timer_returns_to_auto_follow(self, controller, scheduler):
        controller.evaluate(50)
        controller.mark_user_interaction("touch_start")
        scheduler.advance(29)
        assert controller.mode is InteractionMode.USER_CONTROLLED
        scheduler.advance(2)
        assert controller.mode is InteractionMode.AUTO_FOLLOW

    def test_new_gesture_restarts_timer(self, controller, scheduler):
        controller.evaluate(50)
        controller.mark_user_interaction("wheel")
        scheduler.advance(20)
        controller.mark_user_interaction("wheel")
        scheduler.advance(20)
        assert controller.mode is InteractionMode.USER_CONTROLLED
        assert len(scheduler.pending) == 1
        scheduler.advance(11)
        assert controller.mode is InteractionMode.AUTO_FOLLOW

    def test_gesture_then_idle_then_update_follows(self, controller, scheduler):
        controller.evaluate(100)
        controller.mark_user_interaction("wheel")
        scheduler.advance(31)
        decision = controller.evaluate(101)
        assert controller.mode is InteractionMode.AUTO_FOLLOW
        assert decision.action is ViewportAction.FOLLOW_LATEST
        assert decision.visible_range.to_index == 100 + 5

    def test_clock_decay_without_scheduler(self, clock):
        controller = ViewportController(scheduler=None, clock=clock, decay_seconds=30)
        controller.evaluate(10)
        controller.mark_user_interaction("wheel")
        clock.advance(10)
        assert controller.evaluate(11).action is ViewportAction.KEEP
        clock.advance(25)
        assert controller.evaluate(12).action is ViewportAction.FOLLOW_LATEST
        assert controller.mode is InteractionMode.AUTO_FOLLOW

    def test_reset_interaction_cancels_timer(self, controller, scheduler):
        controller.evaluate(10)
        controller.mark_user_interaction("wheel")
        controller.reset_interaction()
        assert controller.mode is InteractionMode.AUTO_FOLLOW
        assert not scheduler.pending
        assert not controller.has_pending_decay

    def test_unknown_gesture_rejected(self, controller):
        with pytest.raises(ValidationError) as exc_info:
            controller.mark_user_interaction("double_click")
        assert exc_info.value.field == "gesture"
        assert exc_info.value.to_dict()["error"] == "VALIDATION_ERROR"
        assert controller.mode is InteractionMode.AUTO_FOLLOW


class TestHelpers:
    def test_bars_range(self, controller):
        assert controller.bars_range(20, 100) == ViewportRange(79, 104)
        assert controller.bars_range(20, 0) is None

    def test_restart_follow_refits(self, controller):
        controller.evaluate(10)
        controller.on_visible_range_changed(ViewportRange(2, 8))
        controller.restart_follow()
        assert controller.evaluate(30).action is ViewportAction.FIT_ALL


class TestLifecycle:
    def test_destroy_cancels_pending_timer(self, controller, scheduler):
        controller.evaluate(10)
        controller.mark_user_interaction("wheel")
        timer = scheduler.pending[0]
        controller.destroy()
        assert timer.cancelled
        scheduler.advance(60)
        assert controller.mode is InteractionMode.USER_CONTROLLED

    def test_destroy_is_idempotent(self, controller):
        controller.destroy()
        controller.destroy()
        controller.mark_user_interaction("wheel")
        assert controller.mode is InteractionMode.AUTO_FOLLOW
