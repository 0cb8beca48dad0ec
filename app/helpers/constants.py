"""
Scoring tables for the rule-based match scorers.

Every weight, cap and vocabulary used by ``app.services.matching`` lives here
so the heuristics can be tuned and tested without touching the algorithm.
"""

# Words dropped during keyword extraction
STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "have", "has",
    "had", "do", "does", "did", "will", "would", "could", "should", "may",
    "might", "must", "can", "shall",
])

# Tokens of this length or shorter are never keywords
MIN_KEYWORD_LENGTH = 3

# Scanned in this order; the first hit in a text is that text's level
EXPERIENCE_LEVELS = (
    "junior", "senior", "lead", "principal", "entry", "mid", "experienced",
)

DOMAINS = (
    "frontend", "backend", "fullstack", "full-stack", "devops",
    "mobile", "web", "data", "ml", "ai",
)

# Full scorer weights (points)
KEYWORD_WEIGHT = 40
KEYWORD_MIN_DENOMINATOR = 10
SKILL_WEIGHT = 30
EXPERIENCE_BONUS = 10
DOMAIN_POINTS_PER_MATCH = 10
DOMAIN_SCORE_CAP = 20

# Reduced scorer weights (points)
REDUCED_TEXT_SIMILARITY_CAP = 50
REDUCED_SKILL_WEIGHT = 50

MIN_SCORE = 0
MAX_SCORE = 100

# Score bands, highest first
EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60
MODERATE_THRESHOLD = 40

# Closing recommendation thresholds
RECOMMEND_APPLY_THRESHOLD = 70
RECOMMEND_HIGHLIGHT_THRESHOLD = 50

# keywordMatches strictly above these values
STRONG_KEYWORD_ALIGNMENT = 5
SOME_KEYWORD_ALIGNMENT = 2

# A credential equal to this value means "not configured"
PLACEHOLDER_API_KEY = "your-openai-api-key-here"
