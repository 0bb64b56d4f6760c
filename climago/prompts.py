from typing import Optional

from climago.models import CityConditions, TravelAdviceRequest, WeatherSnapshot, aqi_label

TRAVEL_GUIDE = """For the city "{city}" (currently {temp}°C, {condition}, AQI: {aqi}), give me a SHORT travel guide in this exact format:

PLACES:
1. [Place Name] - [One line why to visit, max 12 words]
2. [Place Name] - [One line why to visit, max 12 words]
3. [Place Name] - [One line why to visit, max 12 words]
4. [Place Name] - [One line why to visit, max 12 words]
5. [Place Name] - [One line why to visit, max 12 words]

NEARBY:
1. [Destination] - [Distance, one line description]
2. [Destination] - [Distance, one line description]

WEAR: [One short sentence about what to wear today]

EAT: [One famous local dish to try and where]

ALERT: [One health/safety tip based on current weather, or "None" if conditions are pleasant]

Keep every answer ultra-short. No markdown formatting. No asterisks."""

COMPARISON = """You are a travel decision assistant. Compare the following two cities based on weather, comfort, air quality, and travel suitability. Then clearly recommend which city is better to visit today and why.

City A: {a}

City B: {b}

Provide:
1. Short comparison summary (2-3 sentences)
2. Winner city for travel today
3. One-line reason why

Format your response as:
COMPARISON: [your comparison summary]
WINNER: [city name]
REASON: [one-line reason]"""

CITY_BLOCK = """{name}
- Temperature: {temp}°C, Humidity: {humidity}%, Wind: {wind} m/s
- Condition: {condition}
- Air Quality: {aqi_label} (Index: {aqi})"""

SUMMARY = "Summarize current weather for {name}: {temp}°C, {description}, humidity {humidity}%. Short elegant summary."


def _fmt(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return str(round(value))


def travel_guide_prompt(req: TravelAdviceRequest) -> str:
    return TRAVEL_GUIDE.format(
        city=req.city,
        temp=_fmt(req.temp),
        condition=req.condition or "unknown conditions",
        aqi=aqi_label(req.airQuality),
    )


def city_block(city: CityConditions) -> str:
    return CITY_BLOCK.format(
        name=city.name,
        temp=_fmt(city.temp),
        humidity=city.humidity if city.humidity is not None else "N/A",
        wind=city.wind if city.wind is not None else "N/A",
        condition=city.condition or "unknown",
        aqi_label=aqi_label(city.aqi),
        aqi=city.aqi if city.aqi is not None else "N/A",
    )


def comparison_prompt(city_a: CityConditions, city_b: CityConditions) -> str:
    return COMPARISON.format(a=city_block(city_a), b=city_block(city_b))


def summary_prompt(snapshot: WeatherSnapshot) -> str:
    return SUMMARY.format(
        name=snapshot.name,
        temp=round(snapshot.temperature),
        description=snapshot.description,
        humidity=snapshot.humidity,
    )
