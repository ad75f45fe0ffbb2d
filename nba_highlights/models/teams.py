"""Known team names.

Covers the current NBA franchises, the two renamed since 2012, and the
All-Star / Rising Stars exhibition sides, keyed by lower-case name.
"""

NBA_TEAM_NAMES: frozenset[str] = frozenset(
    {
        "atlanta hawks",
        "boston celtics",
        "brooklyn nets",
        "charlotte hornets",
        "chicago bulls",
        "cleveland cavaliers",
        "dallas mavericks",
        "denver nuggets",
        "detroit pistons",
        "golden state warriors",
        "houston rockets",
        "indiana pacers",
        "la clippers",
        "los angeles lakers",
        "memphis grizzlies",
        "miami heat",
        "milwaukee bucks",
        "minnesota timberwolves",
        "new orleans pelicans",
        "new york knicks",
        "oklahoma city thunder",
        "orlando magic",
        "philadelphia 76ers",
        "phoenix suns",
        "portland trail blazers",
        "sacramento kings",
        "san antonio spurs",
        "toronto raptors",
        "utah jazz",
        "washington wizards",
    }
)

FORMER_TEAM_NAMES: frozenset[str] = frozenset({"charlotte bobcats", "new orleans hornets"})

EXHIBITION_TEAM_NAMES: frozenset[str] = frozenset(
    {
        "east",
        "west",
        "team lebron",
        "team stephen",
        "team giannis",
        "team shaq",
        "team chuck",
        "team webber",
        "team hill",
        "world",
        "usa",
    }
)

KNOWN_TEAM_NAMES: frozenset[str] = NBA_TEAM_NAMES | FORMER_TEAM_NAMES | EXHIBITION_TEAM_NAMES

TEAM_ABBREVIATIONS: dict[str, str] = {
    "ATL": "atlanta hawks",
    "BOS": "boston celtics",
    "BKN": "brooklyn nets",
    "CHA": "charlotte hornets",
    "CLE": "cleveland cavaliers",
    "CHI": "chicago bulls",
    "DAL": "dallas mavericks",
    "DEN": "denver nuggets",
    "DET": "detroit pistons",
    "GSW": "golden state warriors",
    "HOU": "houston rockets",
    "IND": "indiana pacers",
    "LAC": "la clippers",
    "LAL": "los angeles lakers",
    "MEM": "memphis grizzlies",
    "MIA": "miami heat",
    "MIL": "milwaukee bucks",
    "MIN": "minnesota timberwolves",
    "NOP": "new orleans pelicans",
    "NYK": "new york knicks",
    "OKC": "oklahoma city thunder",
    "ORL": "orlando magic",
    "PHI": "philadelphia 76ers",
    "PHX": "phoenix suns",
    "POR": "portland trail blazers",
    "SAC": "sacramento kings",
    "SAS": "san antonio spurs",
    "TOR": "toronto raptors",
    "UTA": "utah jazz",
    "WAS": "washington wizards",
}


def canonical_team_name(text: str) -> str | None:
    """
    Resolve a team name or three-letter abbreviation.

    Returns:
        The lower-case canonical name, or None if the team is unknown.
    """
    value = " ".join(text.split())
    abbreviated = TEAM_ABBREVIATIONS.get(value.upper())
    if abbreviated is not None:
        return abbreviated
    lowered = value.lower()
    return lowered if lowered in KNOWN_TEAM_NAMES else None
