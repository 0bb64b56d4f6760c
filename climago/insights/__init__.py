from climago.insights.alerts import smart_alerts
from climago.insights.gear import quick_advice, recommend_gear
from climago.insights.geo import haversine_km
from climago.insights.parsing import advice_tips, parse_advice, parse_verdict
from climago.insights.planner import plan_day
from climago.insights.scoring import comfort_score

__all__ = [
    "advice_tips",
    "comfort_score",
    "haversine_km",
    "parse_advice",
    "parse_verdict",
    "plan_day",
    "quick_advice",
    "recommend_gear",
    "smart_alerts",
]
