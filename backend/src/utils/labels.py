"""Display labels shared by API responses."""

from models.ski_data import SnowQualityCode

AVALANCHE_RISK_LABELS: dict[int, str] = {
    1: "Low",
    2: "Moderate",
    3: "Considerable",
    4: "High",
    5: "Very High",
}


def status_colour(open_count: int, total: int) -> str:
    """Traffic-light colour for an open/total ratio."""
    if total == 0:
        return "red"
    ratio = open_count / total
    if ratio >= 0.75:
        return "green"
    if ratio >= 0.25:
        return "amber"
    return "red"


def avalanche_risk_label(risk: int | None) -> str:
    if risk is None:
        return "Unknown"
    return AVALANCHE_RISK_LABELS.get(risk, "Unknown")


def snow_quality_label(quality: str | None) -> str:
    """English label for a snow code; unknown codes are returned as-is."""
    if not quality:
        return ""
    code = SnowQualityCode.from_code(quality)
    return code.label if code else quality
