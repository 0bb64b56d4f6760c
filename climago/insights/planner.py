from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from climago.models import PlannerSlot

SLOT_NAMES = ("Morning", "Afternoon", "Evening", "Night")


def slot_for_hour(hour: int) -> str:
    if 6 <= hour < 12:
        return "Morning"
    if 12 <= hour < 17:
        return "Afternoon"
    if 17 <= hour < 21:
        return "Evening"
    return "Night"


def slot_suggestion(temp: float, pop: Optional[float], main: Optional[str]) -> str:
    cond = (main or "").lower()
    if (pop or 0) > 0.5 or "rain" in cond or "snow" in cond:
        return "Expect precipitation, stay dry."
    if temp > 30:
        return "Heat warning, stay cool."
    if temp < 10:
        return "Bundle up."
    return "Conditions look good."


def plan_day(forecast: Dict[str, Any]) -> Dict[str, Optional[PlannerSlot]]:
    """
    Map a 5 day / 3 hour forecast onto time-of-day slots.

    The first entry falling into each slot wins. Hours are local to the
    forecast city using its ``city.timezone`` offset (seconds from UTC).
    """
    slots: Dict[str, Optional[PlannerSlot]] = {name: None for name in SLOT_NAMES}
    if not isinstance(forecast, dict):
        return slots

    offset = timedelta(seconds=int((forecast.get("city") or {}).get("timezone") or 0))
    for item in forecast.get("list") or []:
        try:
            local = datetime.fromtimestamp(int(item["dt"]), tz=timezone.utc) + offset
            temp = float(item["main"]["temp"])
            pop = float(item.get("pop") or 0.0)
            weather = (item.get("weather") or [{}])[0]
            desc = weather.get("description") or ""
            icon = weather.get("icon")
            main = weather.get("main")
        except (AttributeError, IndexError, KeyError, TypeError, ValueError):
            continue

        name = slot_for_hour(local.hour)
        if slots[name] is not None:
            continue

        slots[name] = PlannerSlot(
            temp=temp,
            desc=desc,
            icon=icon,
            pop=pop,
            suggestion=slot_suggestion(temp, pop, main),
        )
    return slots
