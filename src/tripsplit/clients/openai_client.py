"""OpenAI GPT client for trip suggestions."""

import logging
from decimal import Decimal

from openai import OpenAI, OpenAIError

from ..exceptions import ConfigurationError, OpenAIAPIError

logger = logging.getLogger(__name__)


class TravelAssistant:
    """GPT-based travel planning assistant.

    Responses are returned as plain text for the caller to show as-is.
    """

    def __init__(self, api_key: str | None, model: str = "gpt-3.5-turbo"):
        """Initialize the assistant."""
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is not set. AI features are disabled."
            )
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        fallback: str,
    ) -> str:
        """Run one chat completion and return its text."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=0.7,
            )
        except OpenAIError as e:
            raise OpenAIAPIError(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        logger.info(
            f"GPT returned {len(content or '')} characters (model: {self.model})"
        )
        return content or fallback

    def generate_recommendations(
        self, destination: str, interests: list[str], budget: Decimal | None = None
    ) -> str:
        """Suggest attractions, restaurants and tips for a destination."""
        budget_line = f"Budget: ${budget}" if budget else ""
        prompt = f"""Generate travel recommendations for {destination}.
User interests: {", ".join(interests)}
{budget_line}

Please provide:
1. Top 3 must-visit attractions
2. 2-3 recommended restaurants
3. Best time to visit
4. Local tips and hidden gems

Keep the response concise and practical."""

        return self._complete(
            "You are a helpful travel planning assistant. "
            "Provide practical, accurate travel advice.",
            prompt,
            max_tokens=500,
            fallback="No recommendations available",
        )

    def generate_itinerary(
        self, destination: str, days: int, interests: list[str]
    ) -> str:
        """Draft a day-by-day itinerary."""
        prompt = f"""Create a {days}-day itinerary for {destination}.
User interests: {", ".join(interests)}

Format as a day-by-day plan with:
- Morning, afternoon, and evening activities
- Estimated time for each activity
- Transportation suggestions
- Meal recommendations

Keep it practical and well-paced."""

        return self._complete(
            "You are a travel planning expert. "
            "Create detailed, practical itineraries.",
            prompt,
            max_tokens=1000,
            fallback="No itinerary available",
        )

    def generate_activities(
        self,
        destination: str,
        days: int,
        interests: list[str],
        budget: Decimal | None = None,
    ) -> str:
        """Suggest timed activities with locations and cost estimates."""
        budget_line = f"Total budget: ${budget}" if budget else ""
        prompt = f"""Generate a detailed {days}-day activity plan for {destination}.
User interests: {", ".join(interests)}
{budget_line}

For each day, list activities as:
- TIME - Activity Name (Location) - duration - estimated cost - short description

Mix sightseeing, meals, and rest. Keep travel time between activities realistic."""

        return self._complete(
            "You are an expert travel planner. Suggest specific activities "
            "with times, locations and costs.",
            prompt,
            max_tokens=1500,
            fallback="No activities available",
        )

    def optimize_budget(
        self, category_totals: dict[str, Decimal], total_budget: Decimal
    ) -> str:
        """Review spending per category against the trip budget."""
        breakdown = ", ".join(
            f"{category}: ${amount}" for category, amount in category_totals.items()
        )
        total_spent = sum(category_totals.values(), Decimal("0"))
        prompt = f"""Analyze this travel budget:
Total Budget: ${total_budget}
Total Spent: ${total_spent}
Expenses: {breakdown}

Provide:
1. Budget analysis (over/under budget)
2. Spending recommendations
3. Areas to save money
4. Suggestions for remaining budget

Keep advice practical and specific."""

        return self._complete(
            "You are a financial advisor specializing in travel budgets. "
            "Provide practical money-saving advice.",
            prompt,
            max_tokens=400,
            fallback="No budget analysis available",
        )

    def generate_notes(
        self, trip_title: str, destination: str, activities: list[str]
    ) -> str:
        """Write packing, etiquette and logistics notes for a trip."""
        planned = ", ".join(activities) if activities else "none yet"
        prompt = f"""Generate helpful travel notes for a trip to {destination} titled "{trip_title}".
Planned activities: {planned}

Include:
- Packing checklist
- Local customs and etiquette
- Emergency contacts and useful phrases
- Money and payment tips"""

        return self._complete(
            "You are a meticulous travel assistant who writes clear, "
            "well-organized trip notes.",
            prompt,
            max_tokens=800,
            fallback="No notes available",
        )
