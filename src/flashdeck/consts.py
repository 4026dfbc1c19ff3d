VERSION = "0.1.0"

NOTE_SUFFIX = ".md"
REVIEWS_DIR_NAME = "reviews"
REVIEW_LOG_SUFFIX = ".jsonl"
