"""Configuration constants.

Centralizes texts, defaults and collaborator settings. Credentials are read
from the environment by ``tripchat.cli.providers``.
"""

# Conversational backend defaults
DEFAULT_LLM_PROVIDER = "gemini"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"

# Transcript texts
WELCOME_TEXT = (
    "Welcome! Ask me anything about your Japan trip. "
    "I can also help you add spots to your itinerary!"
)
UNAVAILABLE_TEXT = "AI Chat is unavailable: API Key not configured."
ERROR_PREFIX = "AI Error: "
INTERRUPTED_TEXT = "Response interrupted."
ITINERARY_VIEW_POINTER = "You can view or modify it in the Itinerary tab."

# Itinerary context block sent ahead of the user's message
ITINERARY_CONTEXT_HEADER = "Context: User's current travel itinerary. Consider this when responding:"
ITINERARY_CONTEXT_FOOTER = "User's new message:"

# Geocoding bias (Tokyo, Japan)
GEOCODING_PROXIMITY = (139.6917, 35.6895)
GEOCODING_COUNTRY = "JP"
MAPBOX_API_URL = "https://api.mapbox.com"
MAPBOX_ROUTE_PROFILE = "mapbox/driving"
HTTP_TIMEOUT_SECONDS = 10.0
