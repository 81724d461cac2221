"""Service for generating prioritized condition insights from the weather bulletin."""

from typing import Sequence

from models.insight import (
    PRIORITY_ORDER,
    ConditionInsight,
    InsightCategory,
    InsightPriority,
    OverallCondition,
)
from models.ski_data import SnowQualityCode, WeatherStation
from services.conditions_service import ResortConditions, analyze_conditions

MAX_INSIGHTS = 4

NO_DATA_CONDITION = OverallCondition(label="No Data", icon="help-circle")


def _insight(
    category: InsightCategory,
    priority: InsightPriority,
    icon: str,
    title: str,
    description: str,
) -> ConditionInsight:
    return ConditionInsight(
        title=title,
        description=description,
        category=category,
        icon=icon,
        priority=priority,
    )


def _visibility_insight(c: ResortConditions) -> ConditionInsight:
    if c.max_wind > 50:
        return _insight(
            InsightCategory.VISIBILITY,
            InsightPriority.HIGH,
            "eye-off",
            "Whiteout Risk",
            "Strong winds creating poor visibility at altitude. Yellow or orange "
            "lens goggles essential. Stick to tree-lined runs at Les Houches if possible.",
        )
    if c.max_wind > 35 or c.is_recent_snow:
        return _insight(
            InsightCategory.VISIBILITY,
            InsightPriority.MEDIUM,
            "glasses",
            "Flat Light Expected",
            "Reduced contrast on the slopes today. Bring yellow, orange or pink lens "
            "goggles to help see terrain features. Avoid steep unfamiliar runs.",
        )
    return _insight(
        InsightCategory.VISIBILITY,
        InsightPriority.LOW,
        "eye",
        "Good Visibility",
        "Clear conditions expected. Dark or mirror lens goggles recommended for "
        "bright snow glare.",
    )


def _temperature_insight(c: ResortConditions) -> ConditionInsight | None:
    avg = round(c.avg_temperature)
    if c.min_temperature < -15:
        return _insight(
            InsightCategory.TEMPERATURE,
            InsightPriority.HIGH,
            "thermometer-snowflake",
            "Extreme Cold",
            f"Summit temps down to {c.min_temperature:g}°C. Add an extra base layer, "
            "cover all exposed skin, and take regular warming breaks. Risk of "
            "frostbite on chairlifts.",
        )
    if c.min_temperature < -10:
        return _insight(
            InsightCategory.TEMPERATURE,
            InsightPriority.MEDIUM,
            "snowflake",
            "Very Cold",
            f"Temperatures around {avg}°C. Wear a good base layer, bring hand "
            "warmers, and cover your face on chairlifts. The cold keeps snow in "
            "great condition.",
        )
    if c.avg_temperature > 5:
        return _insight(
            InsightCategory.TEMPERATURE,
            InsightPriority.MEDIUM,
            "sun",
            "Warm & Sunny",
            f"Mild temperatures around {avg}°C. Snow will soften quickly after "
            "11am. Ski early for best conditions, apply sunscreen and stay hydrated.",
        )
    if c.avg_temperature > 0:
        return _insight(
            InsightCategory.TEMPERATURE,
            InsightPriority.LOW,
            "cloud-sun",
            "Spring-like Conditions",
            "Temperatures hovering around freezing. Dress in layers you can remove. "
            "Morning snow will be firm, softening through the day.",
        )
    return None


def _wind_insight(c: ResortConditions) -> ConditionInsight | None:
    if c.max_wind > 60:
        return _insight(
            InsightCategory.WIND,
            InsightPriority.HIGH,
            "wind",
            "Severe Wind",
            f"Gusts up to {c.max_wind:g}km/h at altitude. Expect lift closures at "
            "exposed areas. Wind chill will be brutal, cover all skin and brace on "
            "chairlifts.",
        )
    if c.max_wind > 40:
        return _insight(
            InsightCategory.WIND,
            InsightPriority.MEDIUM,
            "wind",
            "Strong Winds",
            f"Wind speeds reaching {c.max_wind:g}km/h. Some exposed lifts may close. "
            "Stay low if upper lifts are running but miserable. Watch for "
            "wind-loaded slopes off-piste.",
        )
    if c.avg_wind > 25:
        return _insight(
            InsightCategory.WIND,
            InsightPriority.LOW,
            "wind",
            "Breezy",
            "Moderate winds creating some drift. Good skiing but bring a buff for "
            "chairlifts. Off-piste skiers should check for wind slab on lee slopes.",
        )
    return None


def _snow_insight(c: ResortConditions) -> ConditionInsight | None:
    qualities = c.snow_qualities
    fresh = c.max_fresh_snow_cm
    if SnowQualityCode.FRAICHE in qualities and fresh > 20 and c.is_recent_snow:
        return _insight(
            InsightCategory.SNOW,
            InsightPriority.HIGH,
            "sparkles",
            "Fresh Powder!",
            f"{fresh:g}cm of fresh snow! Get there early for untracked runs. Powder "
            "settles fast here, today and tomorrow are prime. Grands Montets for "
            "best off-piste access.",
        )
    if SnowQualityCode.FRAICHE in qualities and fresh > 10:
        return _insight(
            InsightCategory.SNOW,
            InsightPriority.MEDIUM,
            "snowflake",
            "Good Fresh Snow",
            f"{fresh:g}cm of recent snowfall improving conditions. Some fresh lines "
            "still available on north-facing slopes above 2500m. Pistes will be in "
            "excellent shape.",
        )
    if SnowQualityCode.HUMIDE in qualities:
        return _insight(
            InsightCategory.SNOW,
            InsightPriority.MEDIUM,
            "droplets",
            "Heavy Wet Snow",
            "Humid snow conditions making for sticky, energy-sapping skiing. Wax "
            "your skis for wet snow. Best skiing before 11am when temperatures rise.",
        )
    if SnowQualityCode.CROUTE in qualities:
        return _insight(
            InsightCategory.SNOW,
            InsightPriority.MEDIUM,
            "alert-triangle",
            "Crusty Conditions",
            "Breakable crust has formed on off-piste snow. Stick to groomed runs "
            "unless you enjoy a challenge.",
        )
    if SnowQualityCode.TRANSFORMEE in qualities:
        return _insight(
            InsightCategory.SNOW,
            InsightPriority.LOW,
            "refresh-cw",
            "Transformed Snow",
            "Snow has gone through melt-freeze cycles. Morning will be firm, "
            "softening by midday. Time your runs by aspect and elevation.",
        )
    return None


def _avalanche_insight(c: ResortConditions) -> ConditionInsight | None:
    if c.avalanche_risk >= 4:
        return _insight(
            InsightCategory.AVALANCHE,
            InsightPriority.HIGH,
            "alert-triangle",
            "High Avalanche Danger",
            f"Avalanche risk at {c.avalanche_risk}/5. Stay on marked pistes only. "
            "Natural and human-triggered avalanches likely. Off-piste skiing "
            "strongly discouraged today.",
        )
    if c.avalanche_risk == 3:
        return _insight(
            InsightCategory.AVALANCHE,
            InsightPriority.MEDIUM,
            "mountain",
            "Considerable Avalanche Risk",
            "Avalanche risk at 3/5. Off-piste requires experience, proper equipment "
            "(transceiver, probe, shovel), and ideally a guide. Avoid steep slopes >30°.",
        )
    return None


def _foehn_insight(c: ResortConditions) -> ConditionInsight | None:
    if not c.is_foehn:
        return None
    return _insight(
        InsightCategory.FOEHN,
        InsightPriority.HIGH,
        "thermometer",
        "Foehn Wind Active",
        "Warm southerly Foehn wind is blowing. Temperatures rising unusually, snow "
        "conditions deteriorating rapidly. Increased avalanche risk on south-facing slopes.",
    )


def _snow_base_insight(c: ResortConditions) -> ConditionInsight | None:
    depth = round(c.avg_snow_depth)
    if c.avg_snow_depth > 150:
        return _insight(
            InsightCategory.SNOW_BASE,
            InsightPriority.LOW,
            "gauge",
            "Excellent Snow Base",
            f"Strong base of {depth}cm across the resort. Full terrain coverage and "
            "good conditions even on south-facing slopes.",
        )
    if c.avg_snow_depth < 50:
        return _insight(
            InsightCategory.SNOW_BASE,
            InsightPriority.MEDIUM,
            "alert-triangle",
            "Thin Snow Cover",
            f"Limited base of {depth}cm. Watch for rocks and obstacles. Stick to "
            "well-covered north-facing runs.",
        )
    return None


RULES = (
    _visibility_insight,
    _temperature_insight,
    _wind_insight,
    _snow_insight,
    _avalanche_insight,
    _foehn_insight,
    _snow_base_insight,
)


def generate_insights(
    weather: Sequence[WeatherStation], conditions: ResortConditions | None = None
) -> list[ConditionInsight]:
    """Generate up to four insights, highest priority first.

    Each dimension contributes at most one insight. Insights of equal
    priority keep rule order; anything past the fourth is dropped.
    """
    if conditions is None:
        conditions = analyze_conditions(weather)
    if conditions is None:
        return []

    insights = []
    for rule in RULES:
        insight = rule(conditions)
        if insight is not None:
            insights.append(insight)

    insights.sort(key=lambda i: PRIORITY_ORDER[InsightPriority(i.priority)])
    return insights[:MAX_INSIGHTS]


def overall_condition(
    weather: Sequence[WeatherStation], conditions: ResortConditions | None = None
) -> OverallCondition:
    """One-word verdict for the day."""
    if conditions is None:
        conditions = analyze_conditions(weather)
    if conditions is None:
        return NO_DATA_CONDITION

    first_quality = next(
        (w.snow_quality_code for w in weather if w.snow_quality), None
    )
    if conditions.max_wind > 50 or conditions.avalanche_risk >= 4:
        return OverallCondition(label="Challenging", icon="alert-triangle")
    if first_quality == SnowQualityCode.FRAICHE and conditions.max_fresh_snow_cm > 20:
        return OverallCondition(label="Powder Day", icon="sparkles")
    if conditions.avg_temperature > 5:
        return OverallCondition(label="Spring Skiing", icon="sun")
    if conditions.avg_temperature < -10:
        return OverallCondition(label="Cold & Crisp", icon="snowflake")
    if conditions.max_wind > 35:
        return OverallCondition(label="Windy", icon="wind")
    return OverallCondition(label="Great Conditions", icon="sun")
