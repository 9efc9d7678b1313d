"""
Prompt templates for the reasoning gateway.

Placeholders use ``{name}`` syntax and are filled by ``render_template``.
Literal JSON braces in a template are left untouched because only known
placeholder names are replaced.
"""

from typing import Any


def render_template(template: str, **kwargs: Any) -> str:
    """Render a template string, leaving unresolved vars as-is."""
    result = template
    for key, value in kwargs.items():
        result = result.replace(f"{{{key}}}", "" if value is None else str(value))
    return result


PERSONALIZE_QUESTION = """You are a friendly, enthusiastic travel planning assistant. Generate a warm, personalized question.

Context: {context}
Next Information Needed: {next_step}

Requirements:
- Be conversational and warm, like talking to a friend
- Reference the trip details naturally
- Show excitement about their destination
- Use appropriate travel emojis (✈️ 🌍 📅 👥 💰 🎯 🗺️)
- Keep it concise (1-2 sentences)
- End with a clear question asking for: {next_step}

Generate the personalized question:"""


PARSE_DATE = """Parse this date string into a standard date format.

User's input: "{user_input}"
Current date: {today}
{extra_context}
Rules:
- If no year is mentioned, assume {year}
- Convert to format: YYYY-MM-DD
- Handle ordinals (16th, 1st, 22nd, etc.)
- Handle month names (March, Mar, January, etc.)

Respond with ONLY the date in YYYY-MM-DD format, nothing else.
Example: {example}"""


PARSE_PLANNING_TYPE = """You are parsing a user's response about what they want help planning for their trip.

User's response: "{user_input}"

Determine which planning categories they want help with. Categories are:
- transportation (flights, getting there, local transport, rental cars)
- accommodation (hotels, stays, lodging, places to stay)
- activities (things to do, sightseeing, attractions, experiences)

Respond ONLY with a JSON object in this exact format:
{
  "planningTypes": ["transportation", "accommodation", "activities"],
  "interests": "optional comma-separated interests like adventure, culture, food, nature"
}

Rules:
- If they mention all three or say "all" or "everything", include all three
- If they list multiple (like "transportation, accommodation and activities"), include all mentioned
- If they only mention one or two, only include those
- For interests, extract any specific themes mentioned (adventure, culture, food, nature, relaxation, shopping)
- Keep the exact category names: "transportation", "accommodation", "activities"

Respond with ONLY the JSON, no explanation."""


ALLOCATE_BUDGET = """You are a travel budget allocation expert. You need to intelligently distribute a traveler's budget across different expense categories.

**Trip Details:**
- Route: {origin} to {destination}
- Duration: {nights} nights, {days} days
- Travelers: {travelers} people
- TOTAL BUDGET: ${total} (for ALL {travelers} people, ALL expenses)
- Purpose: {purpose}
- Transportation Type: {transport_type}
- Planning Categories: {categories}

**Your Task:**
Allocate the TOTAL budget of ${total} across these categories, ensuring the sum equals exactly ${total}.

**Allocation Guidelines:**
1. **Transportation ({transport_type})**:
   - Flights: typically 35-45% of budget
   - Buses: typically 10-15% of budget
2. **Accommodation**: 25-35% of budget, covering {nights} nights for {travelers} people
3. **Food**: 20-25% of budget, per person per day for {days} days
4. **Activities**: 15-20% of budget, covering entry fees, tours and experiences
5. **Contingency**: 5-10% for emergencies, tips and misc

**Response Format (JSON only):**
{
  "transportation": [dollar amount],
  "accommodation": [dollar amount],
  "food": [dollar amount],
  "activities": [dollar amount],
  "contingency": [dollar amount],
  "explanation": "Brief explanation of allocation strategy"
}

Ensure: transportation + accommodation + food + activities + contingency = {total}"""


VALIDATE_COSTS = """You are a travel budget expert analyzing search results to determine if they fit within the user's budget.

**Trip Details:**
- Origin: {origin}
- Destination: {destination}
- Dates: {start_date} to {end_date} ({nights} nights, {days} days)
- Travelers: {travelers} people
- TOTAL BUDGET: {budget} (for ALL {travelers} people, covering EVERYTHING)
- Purpose: {purpose}
- Transportation Type: {transport_type}

**Search Results:**

TRANSPORTATION:
{transportation_summary}

ACCOMMODATION:
{accommodation_summary}

ACTIVITIES:
{activities_summary}

**Your Task:**
Analyze ALL search results and extract prices. Calculate the TOTAL estimated cost for the entire trip for ALL {travelers} travelers.

Break down the costs:
1. Transportation: [lowest price per person] x {travelers} people
2. Accommodation: [lowest price per night] x {nights} nights
3. Activities: reasonable activity spending for {days} days
4. Food: {days} days x {travelers} people x reasonable daily food cost
5. **TOTAL**: Sum of all above

**Budget Rules:**
- For {transport_label}: should not exceed 40% of the total budget
- For ACCOMMODATION: should not exceed 40% of the total budget
- ACTIVITIES + FOOD should fit in the remaining budget
- If TOTAL COST > TOTAL BUDGET, mark totalBudgetExceeded as true

**Response Format (JSON only):**
{
  "transportationCostPerPerson": [number],
  "transportationTotalCost": [number],
  "accommodationTotalCost": [number],
  "activitiesEstimate": [number],
  "foodEstimate": [number],
  "totalEstimatedCost": [number],
  "budgetIssues": ["list of specific issues found"],
  "flightsBudgetExceeded": [true/false - true if transportation type is flights AND flights alone exceed 40% of budget],
  "totalBudgetExceeded": [true/false],
  "explanation": "Brief explanation of budget analysis"
}

Look for actual prices in the content."""


RANK_TRANSPORTATION = """You are a travel expert analyzing transportation options.

Trip Details:
- Route: {origin} to {destination}
- Dates: {start_date} to {end_date}
- Travelers: {travelers}
- Budget: {budget}

Search Results:
{results}

Task: Analyze ALL results and select the TOP {top_n} best options that:
1. Best match the budget and travel dates
2. Offer good value for money
3. Have convenient schedules
4. Are compatible with the overall trip plan

Provide a concise response in this format:
**Best Transportation Options:**
1. [Option Name](URL) - Brief reason why it's good (price, timing, convenience)

Keep it concise and actionable."""


RANK_ACCOMMODATION = """You are a travel expert analyzing accommodation options.

Trip Details:
- Destination: {destination}
- Dates: {start_date} to {end_date}
- Travelers: {travelers}
- Budget: {budget}
- Purpose: {purpose}
- Interests: {interests}

Search Results:
{results}

Task: Analyze ALL results and select the TOP {top_n} best accommodations that:
1. Fit within the budget
2. Are well-located for activities
3. Match the travel purpose ({purpose})
4. Offer best value for the group size

Provide a concise response in this format:
**Best Accommodation Options:**
1. [Hotel/Property Name](URL) - Why it's ideal (location, price, amenities)

Keep it concise and highlight what makes each unique."""


RANK_ACTIVITIES = """You are a travel expert analyzing activities and attractions.

Trip Details:
- Destination: {destination}
- Dates: {start_date} to {end_date}
- Travelers: {travelers}
- Budget: {budget}
- Interests: {interests}
- Purpose: {purpose}

Search Results:
{results}

Task: Analyze ALL results and select the TOP {top_n} best activities that:
1. Match the interests: {interests}
2. Are suitable for {travelers} people
3. Fit the travel dates and schedule
4. Offer diverse experiences

Provide a concise response in this format:
**Top Activities & Attractions:**
1. [Activity Name](URL) - Why it matches interests (timing, cost, experience type)

Focus on a balanced mix of experiences."""


DAILY_ITINERARY = """You are a travel expert creating a day-by-day itinerary.

Trip Details:
- Route: {origin} to {destination}
- Duration: {days} days ({start_date} to {end_date})
- Travelers: {travelers}
- Budget: {budget}
- Purpose: {purpose}
- Interests: {interests}

Available Information:
- Transportation: {transportation_count} options found
- Accommodation: {accommodation_count} options found
- Activities: {activities_count} options found

Task: Create a realistic itinerary for {days} days that includes arrival and
departure logistics, balances activities with rest, groups nearby attractions
and fits the budget and interests.

Format as:
📅 **Day-by-Day Itinerary:**

**Day 1 ({start_date}):**
- Morning: [Activity with timing]
- Afternoon: [Activity with timing]
- Evening: [Activity with timing]

[Continue for all {days} days]"""


FALLBACK_ITINERARY = (
    "📅 **Suggested Itinerary:**\n"
    "- Plan your days based on the recommendations above\n"
    "- Mix activities with relaxation time\n"
    "- Allow flexibility for spontaneous discoveries\n"
)
