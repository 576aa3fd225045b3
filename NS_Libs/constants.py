"""
Constants and configuration values for Nano Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Settings file constants
SETTINGS_DIR_NAME = ".nano_studio"
SETTINGS_FILE_NAME = "settings.json"
SCHEMA_VERSION = 1

# Environment variables for the API credential (checked in order)
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

# Model identifiers
DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"

# Brush constants (native pixels)
DEFAULT_BRUSH_RADIUS = 25
MIN_BRUSH_RADIUS = 5
MAX_BRUSH_RADIUS = 150

# Drawing surface colors (RGBA)
SURFACE_EMPTY = (0, 0, 0, 0)
SURFACE_PAINT = (255, 255, 255, 255)
MASK_BACKGROUND = (0, 0, 0, 255)

# Media types
MIME_PNG = "image/png"
MIME_JPEG = "image/jpeg"
MIME_WEBP = "image/webp"
MIME_BMP = "image/bmp"
MIME_GIF = "image/gif"
DEFAULT_MIME_TYPE = MIME_PNG
DEFAULT_OUTPUT_FORMAT = "PNG"

# Pillow format name -> media type
FORMAT_MIME_TYPES = {
    "PNG": MIME_PNG,
    "JPEG": MIME_JPEG,
    "WEBP": MIME_WEBP,
    "BMP": MIME_BMP,
    "GIF": MIME_GIF,
}

# Media type -> file extension for saved results
MIME_EXTENSIONS = {
    MIME_PNG: ".png",
    MIME_JPEG: ".jpg",
    MIME_WEBP: ".webp",
    MIME_BMP: ".bmp",
    MIME_GIF: ".gif",
}

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}

# File naming
OUTPUT_FILE_PREFIX = "nano-studio-"

# Prompt construction
DEFAULT_PROMPT = "Generate an image"
VIEWPOINT_SEPARATOR = " + "

CONTEXT_SOURCE_WITH_MASK = (
    "Edit the first image based on the second mask image "
    "(white pixels = area to change, black = keep)."
)
CONTEXT_SOURCE_ONLY = "Edit the provided image."
CONTEXT_REFERENCE_AFTER_SOURCE = "Use the last provided image as a strict style/content reference."
CONTEXT_REFERENCE_ONLY = "Use the provided image as a visual reference."

OBJECT_ROTATION_CLAUSE = (
    ". Subject Pose: {viewpoints}. IMPORTANT: Rotate the subject/character only, "
    "keep the environment/background exactly the same."
)
CAMERA_ROTATION_CLAUSE = ", Camera View: {viewpoints}"
TIME_CLAUSE = ", Time: {value}"
SEASON_CLAUSE = ", Season: {value}"
STYLE_CLAUSE = ", Style: {value}"

ENHANCE_PROMPT_TEMPLATE = (
    "You are an expert prompt engineer for AI image generation.\n"
    "Rewrite the following simple description into a detailed, high-quality "
    "image generation prompt.\n"
    "Focus on lighting, texture, composition, specific details, and artistic style.\n"
    "Keep it under 150 words. Do not add preamble, just return the prompt.\n"
    "\n"
    'Input: "{prompt}"'
)

# Error classification markers (matched against error text)
PERMISSION_MARKERS = ("403", "PERMISSION_DENIED")
QUOTA_MARKERS = ("429", "RESOURCE_EXHAUSTED")

# Remediation messages
MESSAGE_SAFETY_BLOCKED = (
    "Generation blocked by Safety Filters. Try a different prompt or source image."
)
MESSAGE_NO_IMAGE_RETURNED = (
    "No image generated in response. The model might have returned text only."
)
MESSAGE_PERMISSION_DENIED = (
    "Permission Denied (403). Your API Key may not have access to this model "
    "or is restricted. Check that billing is enabled for the key."
)
MESSAGE_QUOTA_EXCEEDED = (
    "Quota Exceeded (429). You have hit the rate limit or free tier limit. "
    "Try waiting a minute."
)
MESSAGE_MISSING_API_KEY = (
    "Permission Denied. No API key configured: set GEMINI_API_KEY or "
    "save a key in the studio settings."
)
MESSAGE_UNKNOWN = "Unknown error"

# UI constants
DEFAULT_WINDOW_WIDTH = 1400
DEFAULT_WINDOW_HEIGHT = 850
DEFAULT_EDITOR_WIDTH = 1100
DEFAULT_EDITOR_HEIGHT = 800
SURFACE_OVERLAY_COLOR = (255, 196, 0, 140)
SOURCE_PREVIEW_OPACITY = 0.6
