"""Scan history and health insights."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from food_scanner.domain.nutrition import Grade
from food_scanner.domain.products import ScanHistoryEntry, ScanReport
from food_scanner.services.grading import grade_for_score


class HistoryRepository(Protocol):
    """Persistence interface for per-user scan history."""

    def list_entries(self, email: str) -> list[ScanHistoryEntry]:
        """Return a user's history, oldest first."""

    def append_entry(self, email: str, entry: ScanHistoryEntry) -> None:
        """Record a scan for a user."""

    def delete_entries(self, email: str) -> None:
        """Forget a user's history."""


@dataclass(frozen=True)
class InsightsSummary:
    """Aggregated scan history for one user."""

    total_scans: int
    average_score: float | None
    average_grade: Grade | None
    monthly_trend: list[tuple[str, float]]


@dataclass
class InsightsService:
    """Records found scans and summarizes them."""

    repository: HistoryRepository

    def record(self, email: str, report: ScanReport) -> ScanHistoryEntry | None:
        """Append a found scan to the user's history."""
        if report.product is None or report.grade is None:
            return None
        entry = ScanHistoryEntry(
            barcode=report.product.barcode,
            product_name=report.product.name,
            score=report.grade.score,
            grade=report.grade.grade,
            scanned_at=datetime.now(tz=UTC),
        )
        self.repository.append_entry(email, entry)
        return entry

    def history(self, email: str, limit: int = 20) -> list[ScanHistoryEntry]:
        """Return the most recent scans, newest first."""
        entries = self.repository.list_entries(email)
        return list(reversed(entries))[:limit]

    def transfer(self, old_email: str, new_email: str) -> None:
        """Move history when a user's email changes."""
        if old_email == new_email:
            return
        for entry in self.repository.list_entries(old_email):
            self.repository.append_entry(new_email, entry)
        self.repository.delete_entries(old_email)

    def forget(self, email: str) -> None:
        """Drop a deleted user's history."""
        self.repository.delete_entries(email)

    def summary(self, email: str) -> InsightsSummary:
        """Return totals, the average score and a monthly trend."""
        entries = self.repository.list_entries(email)
        if not entries:
            return InsightsSummary(
                total_scans=0, average_score=None, average_grade=None, monthly_trend=[]
            )

        average = sum(entry.score for entry in entries) / len(entries)
        by_month: dict[str, list[float]] = {}
        for entry in entries:
            month = entry.scanned_at.astimezone(UTC).strftime("%Y-%m")
            by_month.setdefault(month, []).append(entry.score)
        trend = [
            (month, sum(scores) / len(scores))
            for month, scores in sorted(by_month.items())
        ]
        return InsightsSummary(
            total_scans=len(entries),
            average_score=average,
            average_grade=grade_for_score(average),
            monthly_trend=trend,
        )
