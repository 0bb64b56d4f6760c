from typing import List, Optional

from climago.models import WeatherSnapshot

EXTREME_HEAT = "Extreme heat warning: stay indoors and hydrate."
HIGH_HEAT = "High heat advisory: avoid prolonged sun exposure."
SEVERE_COLD = "Severe cold warning: frostbite risk."
COLD = "Cold advisory: dress warmly."
STRONG_WIND = "Strong wind advisory: secure loose objects."
HIGH_HUMIDITY = "Very high humidity: may feel uncomfortable."
THUNDERSTORM = "Thunderstorm warning: stay indoors."
SNOWFALL = "Snowfall: drive cautiously."
RAIN_AND_WIND = "Heavy rain with wind: carry a sturdy umbrella."
POOR_AIR = "Air quality is poor: wear a mask outdoors."
HAZARDOUS_AIR = "Hazardous air quality: avoid all outdoor activities."
CHALLENGING = "Overall conditions are challenging: plan accordingly."


def smart_alerts(snapshot: WeatherSnapshot, aqi: Optional[int], score: float) -> List[str]:
    """
    Advisory strings in rule order: heat/cold, wind, humidity, storm
    conditions, air quality, then the low-score fallback.

    ``aqi`` of None means unknown and skips the air quality rules.
    """
    alerts: List[str] = []
    temp = snapshot.temperature
    wind = snapshot.wind_speed
    condition = snapshot.condition.lower()

    if temp > 40:
        alerts.append(EXTREME_HEAT)
    elif temp > 35:
        alerts.append(HIGH_HEAT)

    if temp < -5:
        alerts.append(SEVERE_COLD)
    elif temp < 5:
        alerts.append(COLD)

    if wind > 15:
        alerts.append(STRONG_WIND)
    if snapshot.humidity > 85:
        alerts.append(HIGH_HUMIDITY)

    if "thunder" in condition:
        alerts.append(THUNDERSTORM)
    if "snow" in condition:
        alerts.append(SNOWFALL)
    # Rain on its own is not an alert.
    if "rain" in condition and wind > 10:
        alerts.append(RAIN_AND_WIND)

    if aqi is not None:
        if aqi >= 4:
            alerts.append(POOR_AIR)
        if aqi >= 5:
            alerts.append(HAZARDOUS_AIR)

    if score < 3:
        alerts.append(CHALLENGING)
    return alerts
