"""JSON shapes for domain objects."""

from food_scanner.domain.accounts import UserSession
from food_scanner.domain.nutrition import GradeResult
from food_scanner.domain.products import Product, ScanHistoryEntry, ScanReport
from food_scanner.services.comparison import Comparison
from food_scanner.services.insights import InsightsSummary


def serialize_session(session: UserSession) -> dict[str, object]:
    return {"email": session.email, "role": session.role}


def serialize_product(product: Product) -> dict[str, object]:
    return {
        "barcode": product.barcode,
        "name": product.name,
        "brand": product.brand,
        "quantity": product.quantity,
        "image_url": product.image_url,
        "source": product.source,
        "nutrients": product.nutrients.as_dict(),
        "macro_breakdown": product.nutrients.macro_breakdown(),
        "ingredients_text": product.ingredients_text,
    }


def serialize_grade(grade: GradeResult) -> dict[str, object]:
    return {
        "score": grade.rounded_score,
        "raw_score": grade.score,
        "grade": grade.grade,
        "display_hint": grade.display_hint,
        "good_aspects": list(grade.good_aspects),
        "concerns": list(grade.concerns),
        "levels": grade.levels,
    }


def serialize_report(report: ScanReport) -> dict[str, object]:
    return {
        "status": report.status,
        "barcode": report.barcode,
        "message": report.message,
        "sequence": report.sequence,
        "stale": report.stale,
        "product": serialize_product(report.product) if report.product else None,
        "grade": serialize_grade(report.grade) if report.grade else None,
        "ingredients": [
            {"text": entry.text, "tag": entry.tag, "reason": entry.reason}
            for entry in report.ingredients
        ],
        "summary": {
            "concerning": _serialize_groups(report.summary.concerning),
            "beneficial": _serialize_groups(report.summary.beneficial),
        },
    }


def serialize_comparison(comparison: Comparison) -> dict[str, object]:
    return {
        "first": serialize_report(comparison.first),
        "second": serialize_report(comparison.second),
        "nutrient_differences": comparison.nutrient_differences,
        "healthier_barcode": comparison.healthier_barcode,
    }


def serialize_insights(
    summary: InsightsSummary, recent: list[ScanHistoryEntry]
) -> dict[str, object]:
    return {
        "total_scans": summary.total_scans,
        "average_score": (
            round(summary.average_score, 1)
            if summary.average_score is not None
            else None
        ),
        "average_grade": summary.average_grade,
        "monthly_trend": [
            {"month": month, "score": round(score, 1)}
            for month, score in summary.monthly_trend
        ],
        "recent": [
            {
                "barcode": entry.barcode,
                "product_name": entry.product_name,
                "score": round(entry.score),
                "grade": entry.grade,
                "scanned_at": entry.scanned_at.isoformat(),
            }
            for entry in recent
        ],
    }


def _serialize_groups(groups: dict[str, tuple[str, ...]]) -> list[dict[str, object]]:
    return [
        {"reason": reason, "examples": list(examples)}
        for reason, examples in groups.items()
    ]
