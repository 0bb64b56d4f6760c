from typing import List, Optional

from climago.models import GearItem, WeatherSnapshot

WET_TOKENS = ("rain", "drizzle", "thunder")


def recommend_gear(temperature: float, condition: Optional[str], uv: Optional[float]) -> List[GearItem]:
    gear: List[GearItem] = []

    if uv is not None and uv > 5:
        gear.append(GearItem(item="Sunscreen", reason="High UV index"))
        gear.append(GearItem(item="Hat/Sunglasses", reason="Sun protection"))

    cond = (condition or "").lower()
    if any(token in cond for token in WET_TOKENS):
        gear.append(GearItem(item="Umbrella", reason="Rain expected"))
    if "snow" in cond:
        gear.append(GearItem(item="Boots", reason="Snowy conditions"))

    if temperature < 15:
        gear.append(GearItem(item="Coat/Jacket", reason="Chilly temperatures"))
    elif temperature > 30:
        gear.append(GearItem(item="Water Bottle", reason="Stay hydrated in heat"))

    if not gear:
        gear.append(GearItem(item="Comfortable Shoes", reason="Good for walking"))
    return gear


def quick_advice(snapshot: WeatherSnapshot, score: float) -> List[str]:
    advice = []
    if snapshot.temperature > 28:
        advice.append("Light clothing recommended.")
    if snapshot.temperature < 10:
        advice.append("Coat required.")
    if score > 8:
        advice.append("Perfect weather for outdoor plans.")
    return advice or ["Enjoy your day."]
