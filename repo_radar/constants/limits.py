"""Capacity limits, checked by counting before an insert."""

MAX_RADARS_PER_USER = 5
MAX_REPOS_PER_RADAR = 25
MAX_TOTAL_REPOS = 50

RADAR_NAME_MAX_LENGTH = 50

# Cap on the bulk starred-repository fetch
MAX_STARRED_REPOS = 500
