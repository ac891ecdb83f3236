"""Unit tests for tasks, cancellation tokens and generation-tracked loading."""

from unittest.mock import MagicMock

import pytest

from cwtui.cli.tui.loader import GenerationTracker, LoadState, OneShotLoader, load_task, unique_tag
from cwtui.cli.tui.messages import ContentLoaded, Quit
from cwtui.cli.tui.tasks import CancelToken, Task, after, background, emit, execute
from cwtui.errors import TaskCancelled

pytestmark = pytest.mark.unit


class TestTaskConstructors:
    """Tests for emit, after, background and execute."""

    def test_emit_is_inline(self):
        task = emit(Quit())
        assert task.inline is True
        assert task.delay == 0
        assert task.run() == Quit()
        assert task.name == "Quit"

    def test_after_is_delayed(self):
        task = after(2.0, Quit())
        assert task.inline is False
        assert task.delay == 2.0
        assert task.run() == Quit()

    def test_background_keeps_name(self):
        task = background(lambda: None, name="work")
        assert (task.name, task.inline, task.delay) == ("work", False, 0.0)

    def test_execute_turns_exception_into_error_message(self):
        def boom():
            raise RuntimeError("exploded")

        msg = execute(Task(run=boom, name="boom"))
        assert msg == ContentLoaded(generation=-1, tag="boom", error="exploded")

    def test_execute_passes_result_through(self):
        assert execute(emit(Quit())) == Quit()


class TestCancelToken:
    """Tests for CancelToken with a mocked child process."""

    def test_cancel_terminates_running_process(self):
        process = MagicMock()
        process.poll.return_value = None
        token = CancelToken()
        token.attach(process)
        token.cancel()
        assert token.cancelled
        process.terminate.assert_called_once()

    def test_attach_after_cancel_terminates_immediately(self):
        process = MagicMock()
        process.poll.return_value = None
        token = CancelToken()
        token.cancel()
        token.attach(process)
        process.terminate.assert_called_once()

    def test_finished_process_is_left_alone(self):
        process = MagicMock()
        process.poll.return_value = 0
        token = CancelToken()
        token.attach(process)
        token.cancel()
        process.terminate.assert_not_called()

    def test_detached_process_is_not_terminated(self):
        process = MagicMock()
        process.poll.return_value = None
        token = CancelToken()
        token.attach(process)
        token.detach()
        token.cancel()
        process.terminate.assert_not_called()

    def test_process_gone_during_terminate(self):
        process = MagicMock()
        process.poll.return_value = None
        process.terminate.side_effect = ProcessLookupError
        token = CancelToken()
        token.attach(process)
        token.cancel()
        assert token.cancelled


class TestGenerationTracker:
    """Tests for GenerationTracker."""

    def test_begin_keeps_generation(self):
        tracker = GenerationTracker()
        generation, token = tracker.begin()
        assert generation == 0
        assert tracker.token is token

    def test_advance_cancels_previous_load(self):
        tracker = GenerationTracker()
        _, first = tracker.begin()
        generation, second = tracker.advance()
        assert generation == 1
        assert first.cancelled
        assert not second.cancelled
        assert tracker.is_current(1)
        assert not tracker.is_current(0)

    def test_cancel_clears_token(self):
        tracker = GenerationTracker()
        _, token = tracker.begin()
        tracker.cancel()
        assert token.cancelled
        assert tracker.token is None


class TestLoadTask:
    """Tests for load_task."""

    def test_success(self):
        task = load_task("t", 3, lambda: "payload")
        assert task.name == "load:t"
        assert task.run() == ContentLoaded(generation=3, tag="t", payload="payload")

    def test_failure_becomes_error(self):
        def fail():
            raise ValueError("bad input")

        msg = load_task("t", 1, fail).run()
        assert msg.error == "bad input"
        assert msg.generation == 1
        assert not msg.ok

    def test_cancelled_load_still_reports(self):
        token = CancelToken()
        token.cancel()

        def fail():
            raise TaskCancelled("ccusage")

        msg = load_task("t", 2, fail, token).run()
        assert msg == ContentLoaded(generation=2, tag="t", error="cancelled")


class TestOneShotLoader:
    """Tests for OneShotLoader state transitions."""

    def test_ready_after_result(self):
        loader = OneShotLoader("docs", lambda: "text")
        task = loader.start()
        assert loader.state is LoadState.LOADING
        assert loader.accept(task.run()) is True
        assert loader.state is LoadState.READY
        assert loader.content == "text"

    def test_error_result(self):
        def fail():
            raise OSError("disk gone")

        loader = OneShotLoader("docs", fail)
        loader.accept(loader.start().run())
        assert loader.state is LoadState.ERROR
        assert loader.error == "disk gone"

    def test_stale_generation_is_dropped(self):
        loader = OneShotLoader("docs", lambda: "text")
        stale = loader.start().run()
        loader.start()
        assert loader.accept(stale) is False
        assert loader.state is LoadState.LOADING
        assert loader.content is None

    def test_foreign_tag_is_dropped(self):
        first = OneShotLoader("docs", lambda: "first")
        second = OneShotLoader("docs", lambda: "second")
        second.start()
        assert first.tag != second.tag
        assert second.accept(first.start().run()) is False
        assert second.state is LoadState.LOADING

    def test_cancel_marks_token(self):
        loader = OneShotLoader("docs", lambda: "x")
        loader.start()
        token = loader._tracker.token  # pylint: disable=protected-access
        loader.cancel()
        assert token.cancelled

    def test_unique_tag_has_prefix(self):
        a, b = unique_tag("cost"), unique_tag("cost")
        assert a != b
        assert a.startswith("cost#")
