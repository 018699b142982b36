"""Analytics derivation from a run's workspaces, users and tasks."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from app.shared.seeder.config import COLUMN_STATUS

if TYPE_CHECKING:
    from app.shared.seeder.fixtures import FixtureGenerator


STATUSES = sorted(set(COLUMN_STATUS.values()))
PRIORITIES = ["low", "medium", "high", "critical"]
DATA_SOURCE = "taskhub_seeder"


def as_datetime(value: Any) -> datetime | None:
    """Accept both in-run datetimes and ISO strings read back from the store."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _hours(delta: timedelta) -> float:
    return delta.total_seconds() / 3600


class TaskMetrics:
    """Aggregate figures over one population of tasks."""

    def __init__(self, tasks: Sequence[Mapping[str, Any]], now: datetime) -> None:
        self.tasks = list(tasks)
        self.now = now

    @property
    def total(self) -> int:
        return len(self.tasks)

    def with_status(self, status: str) -> int:
        return sum(1 for task in self.tasks if task.get("status") == status)

    @property
    def overdue(self) -> int:
        count = 0
        for task in self.tasks:
            due = as_datetime(task.get("due_date"))
            if due is not None and due < self.now and task.get("status") != "done":
                count += 1
        return count

    @property
    def completion_rate(self) -> float:
        if not self.tasks:
            return 0.0
        return round(self.with_status("done") / self.total * 100, 2)

    @property
    def average_duration_hours(self) -> float:
        durations = []
        for task in self.tasks:
            started = as_datetime(task.get("started_at"))
            completed = as_datetime(task.get("completed_at"))
            if started is not None and completed is not None:
                durations.append(_hours(completed - started))
        return round(sum(durations) / len(durations), 2) if durations else 0.0

    @property
    def hours_spent(self) -> float:
        return float(sum(task.get("actual_hours") or 0 for task in self.tasks))

    @property
    def hours_estimated(self) -> float:
        return float(sum(task.get("estimated_hours") or 0 for task in self.tasks))

    @property
    def productivity_score(self) -> float:
        if not self.tasks:
            return 0.0
        completion = self.with_status("done") / self.total * 50
        timeliness = max(0.0, 50 - self.overdue / self.total * 50)
        return round(min(100.0, completion + timeliness), 2)

    @property
    def velocity(self) -> int:
        """Tasks completed in the 30 days before ``now``."""
        since = self.now - timedelta(days=30)
        completed = [as_datetime(task.get("completed_at")) for task in self.tasks]
        return sum(1 for value in completed if value is not None and value > since)

    def status_distribution(self) -> dict[str, int]:
        counts = Counter(task.get("status") for task in self.tasks)
        return {status: counts.get(status, 0) for status in STATUSES}

    def priority_distribution(self) -> dict[str, int]:
        counts = Counter(task.get("priority") for task in self.tasks)
        return {priority: counts.get(priority, 0) for priority in PRIORITIES}


class AnalyticsGenerator:
    """Builds workspace, user and system analytics documents.

    Metrics are computed from the task population; only trends and metadata
    confidence values are random.
    """

    def __init__(self, fixtures: FixtureGenerator) -> None:
        self.fixtures = fixtures

    def trend(self, points: int) -> list[dict[str, Any]]:
        """Daily series ending at the reference time."""
        fx = self.fixtures
        start = fx.reference_time - timedelta(days=points - 1)
        return [
            {"date": start + timedelta(days=offset), "value": fx.number(0, 100)}
            for offset in range(points)
        ]

    def _document(
        self,
        scope: str,
        scope_id: str,
        name: str,
        metrics: dict[str, Any],
        trends: dict[str, Any],
        insights: list[str],
        sample_size: int,
        confidence: tuple[float, float] = (0.8, 1.0),
    ) -> dict[str, Any]:
        fx = self.fixtures
        return {
            "_id": fx.object_id(),
            "scope": scope,
            "scope_id": scope_id,
            "name": name,
            "period": "monthly",
            "date": fx.reference_time,
            "metrics": metrics,
            "trends": trends,
            "insights": insights,
            "metadata": {
                "data_source": DATA_SOURCE,
                "confidence": fx.number(*confidence),
                "sample_size": sample_size,
            },
            "created_at": fx.reference_time,
            "updated_at": fx.reference_time,
        }

    def for_workspace(
        self,
        workspace: Mapping[str, Any],
        tasks: Sequence[Mapping[str, Any]],
    ) -> dict[str, Any]:
        now = self.fixtures.reference_time
        scoped = TaskMetrics([task for task in tasks if task.get("workspace") == workspace["_id"]], now)
        metrics = {
            "total_tasks": scoped.total,
            "completed_tasks": scoped.with_status("done"),
            "in_progress_tasks": scoped.with_status("in_progress"),
            "overdue_tasks": scoped.overdue,
            "completion_rate": scoped.completion_rate,
            "average_task_duration": scoped.average_duration_hours,
            "total_hours_spent": scoped.hours_spent,
            "total_hours_estimated": scoped.hours_estimated,
            "productivity_score": scoped.productivity_score,
            "team_velocity": scoped.velocity,
            "member_count": len(workspace.get("members") or []),
            "task_distribution": scoped.status_distribution(),
            "priority_distribution": scoped.priority_distribution(),
        }
        trends = {
            "task_completion": self.trend(30),
            "productivity": self.trend(30),
            "team_activity": self.trend(30),
        }
        return self._document(
            "workspace",
            workspace["_id"],
            workspace.get("name", ""),
            metrics,
            trends,
            self.insights(scoped),
            scoped.total,
        )

    def for_user(self, user: Mapping[str, Any], tasks: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        now = self.fixtures.reference_time
        assigned = TaskMetrics([task for task in tasks if user["_id"] in (task.get("assignees") or [])], now)
        reported = sum(1 for task in tasks if task.get("reporter") == user["_id"])
        watching = sum(1 for task in tasks if user["_id"] in (task.get("watchers") or []))
        metrics = {
            "total_tasks_assigned": assigned.total,
            "tasks_reported": reported,
            "tasks_watching": watching,
            "completed_tasks": assigned.with_status("done"),
            "overdue_tasks": assigned.overdue,
            "completion_rate": assigned.completion_rate,
            "average_task_duration": assigned.average_duration_hours,
            "total_hours_spent": assigned.hours_spent,
            "total_hours_estimated": assigned.hours_estimated,
            "productivity_score": assigned.productivity_score,
            "task_distribution": assigned.status_distribution(),
            "priority_handling": assigned.priority_distribution(),
        }
        trends = {"productivity": self.trend(30), "task_completion": self.trend(30)}
        return self._document(
            "user",
            user["_id"],
            user.get("name", ""),
            metrics,
            trends,
            self.insights(assigned),
            assigned.total,
        )

    def for_system(
        self,
        users: Sequence[Mapping[str, Any]],
        workspaces: Sequence[Mapping[str, Any]],
        tasks: Sequence[Mapping[str, Any]],
    ) -> dict[str, Any]:
        fx = self.fixtures
        overall = TaskMetrics(tasks, fx.reference_time)
        total_users = len(users)
        total_workspaces = len(workspaces)
        metrics = {
            "total_users": total_users,
            "total_workspaces": total_workspaces,
            "total_tasks": overall.total,
            "completed_tasks": overall.with_status("done"),
            "overall_completion_rate": overall.completion_rate,
            "average_tasks_per_user": round(overall.total / total_users, 2) if total_users else 0.0,
            "average_tasks_per_workspace": (
                round(overall.total / total_workspaces, 2) if total_workspaces else 0.0
            ),
            "verified_users": sum(1 for user in users if user.get("email_verified")),
            "system_uptime": fx.number(99.5, 99.9),
            "average_response_time_ms": fx.number(100, 500, 1),
        }
        trends = {"user_growth": self.trend(12), "task_creation": self.trend(12)}
        return self._document(
            "system",
            "system",
            "TaskHub",
            metrics,
            trends,
            self.insights(overall),
            overall.total + total_users + total_workspaces,
            confidence=(0.9, 1.0),
        )

    @staticmethod
    def insights(metrics: TaskMetrics) -> list[str]:
        if metrics.total == 0:
            return ["No tasks yet"]
        insights = []
        if metrics.completion_rate >= 50:
            insights.append("High completion rate")
        else:
            insights.append("Most tasks are still open")
        if metrics.overdue:
            insights.append(f"{metrics.overdue} overdue task(s) need attention")
        if metrics.hours_spent > metrics.hours_estimated:
            insights.append("Time spent exceeds estimates")
        return insights
