from climago.models import WeatherSnapshot

BASE_SCORE = 5.0
MIN_SCORE = 0.0
MAX_SCORE = 10.0

WET_CONDITIONS = ("rain", "snow", "thunder")


def score_metrics(temperature: float, humidity: float, condition: str) -> float:
    score = BASE_SCORE

    # Bonus tiers are disjoint; only one applies.
    if 18 <= temperature <= 26:
        score += 3.0
    elif 10 <= temperature < 18:
        score += 1.0
    elif 26 < temperature <= 32:
        score += 1.0

    if 30 <= humidity <= 60:
        score += 2.0

    if temperature > 35 or temperature < 0:
        score -= 3.0
    if humidity > 80:
        score -= 1.0

    cond = (condition or "").lower()
    if any(token in cond for token in WET_CONDITIONS):
        score -= 2.0

    return min(MAX_SCORE, max(MIN_SCORE, score))


def comfort_score(snapshot: WeatherSnapshot) -> float:
    """Comfort score in [0, 10] from temperature, humidity and the primary condition."""
    return score_metrics(snapshot.temperature, snapshot.humidity, snapshot.condition)
