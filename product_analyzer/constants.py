"""All magic values live here — no inline literals anywhere else."""

# Staging
MAX_STAGED_IMAGES = 4
PNG_MIME_TYPE = "image/png"
PNG_FORMAT = "PNG"
# Pillow modes the PNG writer stores as-is; anything else is converted first
PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})

# Providers and default models
PROVIDER_GEMINI = "gemini"
PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"
DEFAULT_VISION_PROVIDER = PROVIDER_GEMINI
DEFAULT_VISION_MODELS = {
    PROVIDER_GEMINI: "gemini-2.0-flash-001",
    PROVIDER_CLAUDE: "claude-opus-4-6",
    PROVIDER_OPENAI: "gpt-4o",
}
DEFAULT_MAX_TOKENS = 1024

# Prompt suffix asking the model to label each image's answer
RESPONSE_FORMAT_INSTRUCTION = (
    'Please format your response using "image1:", "image2:", etc. '
    "for each image analysis. For example:\n"
    "image1: [analysis for first image]\n"
    "image2: [analysis for second image]"
)
DELIMITER_TEMPLATE = "image{index}:"

# Parse sentinels
MSG_ANALYSIS_NOT_AVAILABLE = "Analysis not available or parsing failed."
MSG_ANALYSIS_NOT_PARSED = (
    "Individual analysis not parsed. Full response assigned to first image."
)
MSG_PARSE_FAILED_FULL_RESPONSE = "Failed to parse results correctly. Full response: %s"
MSG_PARSE_ERROR = "Parsing error."

# Error display prefixes
ERR_PREFIX_IMAGE = "Image Loading Error"
ERR_PREFIX_API = "API Error"
ERR_PREFIX_GENERAL = "Error"

# Error messages
MSG_ERR_NO_TEXT = "No text content in API response."
MSG_ERR_UNEXPECTED = "An unexpected error occurred: %s"
MSG_ERR_PNG_ENCODE = "Could not get PNG data for image %s"
MSG_ERR_DECODE = "Could not decode image %s"
MSG_ERR_NO_IMAGES = "Please add at least one image to analyze."
MSG_ERR_NO_QUERY = "Please enter a query."
MSG_ERR_BUSY = "An analysis is already in progress."

# Log messages
MSG_STARTING = "Analyzing with %s (%s)"
MSG_SUBMITTING = "Submitting %d image(s) for analysis"
MSG_ANALYSIS_DONE = "✓ Analysis complete (%.1fs)"
MSG_ANALYSIS_FAILED = "✗ Analysis failed: %s"
MSG_STAGING_FULL = "Staging full — dropped %d image(s)"
MSG_COUNT_MISMATCH = "Parsing error: expected %d analyses, got %d"
