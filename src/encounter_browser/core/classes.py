"""Class id lookups used when rendering party members."""

CLASS_NAMES: dict[int, str] = {
    0: "Unknown",
    101: "Warrior (Male)",
    102: "Berserker",
    103: "Destroyer",
    104: "Gunlancer",
    105: "Paladin",
    111: "Warrior (Female)",
    112: "Slayer",
    201: "Mage",
    202: "Arcanist",
    203: "Summoner",
    204: "Bard",
    205: "Sorceress",
    301: "Martial Artist (Female)",
    302: "Wardancer",
    303: "Scrapper",
    304: "Soulfist",
    305: "Glaivier",
    311: "Martial Artist (Male)",
    312: "Striker",
    313: "Breaker",
    401: "Delain",
    402: "Deathblade",
    403: "Shadowhunter",
    404: "Reaper",
    405: "Souleater",
    501: "Gunner (Male)",
    502: "Sharpshooter",
    503: "Deadeye",
    504: "Artillerist",
    505: "Machinist",
    511: "Gunner (Female)",
    512: "Gunslinger",
    601: "Specialist",
    602: "Artist",
    603: "Aeromancer",
    604: "Wildsoul",
}

ICON_DIR = "images/classes"


def class_name(class_id: int) -> str:
    """Display name for a class id (indexed access, raises KeyError)."""
    return CLASS_NAMES[class_id]


def class_icon_path(class_id: int) -> str:
    """Relative icon asset path for a class id."""
    return f"{ICON_DIR}/{class_id}.png"
