"""Weight constants that tune recommendation behavior."""

# Rating breakpoints -> per-entry tag weight, checked top-down
RATING_WEIGHTS = (
    (4.5, 3.0),
    (4.0, 2.5),
    (3.5, 2.0),
    (3.0, 1.5),
)
UNRATED_WEIGHT = 1.0 # Entry with no rating at all
LOW_RATING_WEIGHT = 0.5 # Anything rated below 3.0

TOP_TAG_LIMIT = 20 # Tags used to pre-filter candidates
USER_TOP_TAGS_SHOWN = 10 # Tags echoed back in the response

TAG_SCORE_WEIGHT = 10 # Multiplier on summed tag weights
AVERAGE_RATING_WEIGHT = 2 # Multiplier on the catalog average rating
POPULARITY_WEIGHT = 0.5 # Multiplier on ln(review_count + 1)

# Collection statuses that describe taste (completed, in progress)
TASTE_STATUSES = (1, 2)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
