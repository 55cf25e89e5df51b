from datetime import timedelta

POSTS_PER_PAGE = 10

CODE_TTL = timedelta(minutes=5)
CODE_UPPER_BOUND = 1_000_000

SESSION_TTL = timedelta(hours=8)
SESSION_COOKIE_NAME = "Authorization"

ALLOWED_EMAIL_TLDS = {"com", "net", "org", "io"}

# deepest page the posts listing will look at
MAX_PAGE = 1_000_000

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}
