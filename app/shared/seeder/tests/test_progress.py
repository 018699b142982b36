"""Tests for progress telemetry."""

import io

from app.shared.seeder.progress import MultiStepProgressTracker, ProgressTracker, format_duration


class TestFormatDuration:
    """Tests for format_duration."""

    def test_seconds(self):
        assert format_duration(3.9) == "3s"

    def test_minutes(self):
        assert format_duration(125) == "2m 5s"

    def test_hours(self):
        assert format_duration(3723) == "1h 2m 3s"


class TestProgressTracker:
    """Tests for ProgressTracker."""

    def test_disabled_writes_nothing(self):
        """Test a disabled tracker counts but stays silent."""
        stream = io.StringIO()
        tracker = ProgressTracker(4, "Users", stream=stream, enabled=False)

        tracker.increment(2)
        tracker.warn("careful")
        tracker.complete()

        assert stream.getvalue() == ""
        assert tracker.percentage == 100.0

    def test_percentage_with_zero_total(self):
        """Test an empty total reports 0%."""
        assert ProgressTracker(0, enabled=False).percentage == 0.0

    def test_complete_resyncs_to_actual_count(self):
        """Test completing after overshooting sets total to the count."""
        tracker = ProgressTracker(3, enabled=False)
        tracker.increment(5)

        tracker.complete()

        assert tracker.total == 5
        assert tracker.current == 5

    def test_complete_fills_short_step(self):
        """Test completing early jumps to 100%."""
        tracker = ProgressTracker(10, enabled=False)
        tracker.increment(3)

        tracker.complete()

        assert tracker.current == 10
        assert tracker.percentage == 100.0

    def test_render_contains_counts(self):
        """Test the rendered line shows label, counts and message."""
        tracker = ProgressTracker(4, "Tasks", enabled=False)
        tracker.current = 2

        line = tracker.render("halfway")

        assert line.startswith("Tasks: [")
        assert "50.0%" in line
        assert "(2/4)" in line
        assert line.endswith("| halfway")

    def test_log_clears_line_first(self):
        """Test log lines are printed on a cleared line."""
        stream = io.StringIO()
        tracker = ProgressTracker(2, "Users", stream=stream)

        tracker.log("hello")

        assert "\r\033[Khello\n" in stream.getvalue()

    def test_eta_unknown_before_first_item(self):
        assert ProgressTracker(5, enabled=False).eta is None


class TestMultiStepProgressTracker:
    """Tests for MultiStepProgressTracker."""

    def test_step_lifecycle(self):
        """Test steps are recorded as completed or failed."""
        stream = io.StringIO()
        tracker = MultiStepProgressTracker(["Users", "Tasks"], stream=stream)

        tracker.start_step(0, total=2)
        tracker.update_step(2)
        tracker.complete_step()
        tracker.start_step(1)
        tracker.fail_step("boom")

        output = stream.getvalue()
        assert tracker.completed_steps == ["Users"]
        assert tracker.failed_steps == ["Tasks"]
        assert "Starting: Users (1/2)" in output
        assert "Tasks failed: boom" in output

    def test_set_step_total(self):
        """Test the active step total can change after it starts."""
        tracker = MultiStepProgressTracker(["Users"], enabled=False)
        step = tracker.start_step(0)

        tracker.set_step_total(7)

        assert step.total == 7

    def test_messages_before_first_step_use_overall(self):
        """Test logging works before any step has started."""
        stream = io.StringIO()
        tracker = MultiStepProgressTracker(["Users"], stream=stream)

        tracker.info("starting")

        assert "starting" in stream.getvalue()
        assert tracker.step_name == "Step 0"
