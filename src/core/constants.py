"""Core constants used across catalyst-sb modules.

This module centralizes table names, source locations, and limits.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

import math

FUNDS_TABLE = "Funds"
CHALLENGES_TABLE = "Challenges"
PROPOSALS_TABLE = "Proposals"
ASSESSORS_TABLE = "Assessors"
ASSESSMENTS_TABLE = "Assessments"
SUPPORTED_TABLES = (
    FUNDS_TABLE,
    CHALLENGES_TABLE,
    PROPOSALS_TABLE,
    ASSESSORS_TABLE,
    ASSESSMENTS_TABLE,
)

DEFAULT_OPTIONS_FILE_NAME = "options.json"
DEFAULT_CHALLENGES_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/Project-Catalyst/voter-tool/master/"
    "public/data/f{fund}/challenges.json"
)
DEFAULT_PROPOSALS_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/Project-Catalyst/voter-tool/master/"
    "public/data/f{fund}/proposals.json"
)
DEFAULT_ASSESSMENTS_URI = "data/f{fund}/assessments.csv"
SUPABASE_REST_PATH = "/rest/v1"

DEFAULT_CURRENCY = "$"
CHALLENGE_SETTING_PATTERN = r"Fund\d*\s*[Cc]hallenge\s*[Ss]etting"
NOT_A_NUMBER = math.nan

INSERT_CHUNK_THRESHOLD = 1500
INSERT_CHUNK_SIZE = 1000
ASSESSOR_LOOKUP_BATCH_SIZE = 100
