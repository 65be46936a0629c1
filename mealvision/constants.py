"""All magic values live here — no inline literals anywhere else."""

# Languages
LANGUAGE_ENGLISH = "english"
LANGUAGE_HEBREW = "hebrew"

# Providers
PROVIDER_OPENAI = "openai"
PROVIDER_CLAUDE = "claude"
SUPPORTED_PROVIDERS = (PROVIDER_OPENAI, PROVIDER_CLAUDE)

# Models
OPENAI_MODEL = "gpt-4o"
CLAUDE_MODEL = "claude-opus-4-6"

# Image payload
IMAGE_MEDIA_TYPE = "image/jpeg"
IMAGE_DETAIL = "high"

# Per-call budgets: (max_tokens, temperature)
ANALYSIS_MAX_TOKENS = 2000
ANALYSIS_TEMPERATURE = 0.1
UPDATE_MAX_TOKENS = 1500
UPDATE_TEMPERATURE = 0.1
TEXT_MAX_TOKENS = 1000
TEXT_TEMPERATURE = 0.7

# Normalization defaults
DEFAULT_CONFIDENCE = 75.0
DEFAULT_SERVING_SIZE = "1 serving"
CALORIE_MISMATCH_TOLERANCE = 0.2
UNKNOWN_MEAL_EN = "Unknown meal"
UNKNOWN_MEAL_HE = "ארוחה לא מזוהה"
UNKNOWN_INGREDIENT_EN = "Unknown ingredient"
UNKNOWN_INGREDIENT_HE = "מרכיב לא מזוהה"

# Provider error substrings (matched case-insensitively)
PROVIDER_ERR_QUOTA = "quota"
PROVIDER_ERR_RATE_LIMIT = "rate limit"
PROVIDER_ERR_INVALID_REQUEST = "invalid_request_error"

# User-facing errors
MSG_ERR_NOT_CONFIGURED = "AI API key not configured"
MSG_ERR_QUOTA = "AI analysis quota exceeded. Please try again later."
MSG_ERR_RATE_LIMIT = "Too many requests. Please wait a moment and try again."
MSG_ERR_INVALID_IMAGE = "Invalid image format. Please try a different image."
MSG_ERR_ANALYSIS_FAILED = "AI analysis failed. Please try again."
MSG_ERR_UPDATE_FAILED = "Failed to update meal analysis"
MSG_ERR_EMPTY_RESPONSE = "No response content from the model"
MSG_ERR_NO_JSON = "No JSON object found in model response"

# Log messages
MSG_ANALYSIS_START = "🤖 Starting meal analysis…"
MSG_ANALYSIS_LANGUAGE = "🌐 Language: %s"
MSG_ANALYSIS_UPDATE_TEXT = "💬 Update text provided: %s"
MSG_ANALYSIS_EDITED_COUNT = "🥗 Edited ingredients count: %d"
MSG_REQUEST_SENT = "📤 Sending request to %s…"
MSG_RESPONSE_RECEIVED = "📥 Received response (%d chars)"
MSG_PARSED_MEAL = "🍽️ Parsed meal %r with %d ingredients"
MSG_ANALYSIS_DONE = "✓ Analysis completed"
MSG_ANALYSIS_ERROR = "✗ Meal analysis error: %s"
MSG_UPDATE_START = "🔄 Updating meal analysis…"
MSG_UPDATE_ERROR = "✗ Meal update error: %s"
MSG_TEXT_ERROR = "✗ Text generation error: %s"
MSG_CALORIE_MISMATCH = (
    "⚠️ Ingredient totals don't match meal totals: "
    "meal=%.0f kcal, ingredients=%.0f kcal, difference=%.0f kcal"
)
MSG_SKIPPED_INGREDIENT = "Skipped non-object ingredient: %r"
MSG_NO_BACKEND = "No AI credential configured — analysis disabled"
MSG_BACKEND_SELECTED = "→ Using %s backend"

# User prompt texts (sent with the system prompt)
USER_TEXT_ANALYZE = "Please analyze this meal image and provide detailed nutritional information."
USER_TEXT_ANALYZE_FEEDBACK = (
    'Please analyze this meal image and incorporate the following user feedback: "%s".'
)
USER_TEXT_EDITED_COUNT = "The user has also provided %d edited ingredients."
USER_TEXT_UPDATE = 'Please update the meal analysis based on this feedback: "%s"'
