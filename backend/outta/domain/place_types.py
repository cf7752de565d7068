from __future__ import annotations

from typing import Iterable, Optional

# Parent categories shown in the homepage place-type tabs
PLACE_CATEGORIES = (
    "Playground",
    "Park",
    "Museum",
    "Library",
    "Amusement",
    "Sports & Fitness",
    "Arts & Culture",
    "Nature",
    "Learning",
    "Community",
    "Camp",
    "Other",
)

OTHER = "Other"

GOOGLE_TYPE_TO_CATEGORY = {
    "playground": "Playground",
    "park": "Park",
    "state_park": "Park",
    "national_park": "Park",
    "dog_park": "Park",
    "picnic_ground": "Park",
    "barbecue_area": "Park",
    "museum": "Museum",
    "aquarium": "Museum",
    "planetarium": "Museum",
    "science_museum": "Museum",
    "childrens_museum": "Museum",
    "library": "Library",
    "amusement_park": "Amusement",
    "amusement_center": "Amusement",
    "water_park": "Amusement",
    "zoo": "Amusement",
    "theme_park": "Amusement",
    "wildlife_park": "Amusement",
    "video_arcade": "Amusement",
    "bowling_alley": "Amusement",
    "miniature_golf": "Amusement",
    "mini_golf": "Amusement",
    "escape_room": "Amusement",
    "laser_tag": "Amusement",
    "trampoline_park": "Amusement",
    "go_kart_track": "Amusement",
    "ferris_wheel": "Amusement",
    "roller_coaster": "Amusement",
    "gym": "Sports & Fitness",
    "fitness_center": "Sports & Fitness",
    "swimming_pool": "Sports & Fitness",
    "ice_skating_rink": "Sports & Fitness",
    "skating_rink": "Sports & Fitness",
    "sports_complex": "Sports & Fitness",
    "sports_club": "Sports & Fitness",
    "sports_coaching": "Sports & Fitness",
    "athletic_field": "Sports & Fitness",
    "stadium": "Sports & Fitness",
    "arena": "Sports & Fitness",
    "golf_course": "Sports & Fitness",
    "tennis_court": "Sports & Fitness",
    "basketball_court": "Sports & Fitness",
    "soccer_field": "Sports & Fitness",
    "skateboard_park": "Sports & Fitness",
    "cycling_park": "Sports & Fitness",
    "ski_resort": "Sports & Fitness",
    "marina": "Sports & Fitness",
    "art_gallery": "Arts & Culture",
    "art_studio": "Arts & Culture",
    "performing_arts_theater": "Arts & Culture",
    "movie_theater": "Arts & Culture",
    "concert_hall": "Arts & Culture",
    "opera_house": "Arts & Culture",
    "philharmonic_hall": "Arts & Culture",
    "theater": "Arts & Culture",
    "theatre": "Arts & Culture",
    "cultural_center": "Arts & Culture",
    "cultural_landmark": "Arts & Culture",
    "historical_landmark": "Arts & Culture",
    "historical_place": "Arts & Culture",
    "monument": "Arts & Culture",
    "sculpture": "Arts & Culture",
    "dance_hall": "Arts & Culture",
    "comedy_club": "Arts & Culture",
    "botanical_garden": "Nature",
    "garden": "Nature",
    "hiking_area": "Nature",
    "beach": "Nature",
    "wildlife_refuge": "Nature",
    "nature_reserve": "Nature",
    "campground": "Nature",
    "observation_deck": "Nature",
    "visitor_center": "Nature",
    "tourist_attraction": "Nature",
    "preschool": "Learning",
    "school": "Learning",
    "primary_school": "Learning",
    "secondary_school": "Learning",
    "university": "Learning",
    "education_center": "Learning",
    "tutoring_service": "Learning",
    "driving_school": "Learning",
    "language_school": "Learning",
    "music_school": "Learning",
    "dance_school": "Learning",
    "art_school": "Learning",
    "cooking_school": "Learning",
    "community_center": "Community",
    "event_venue": "Community",
    "convention_center": "Community",
    "banquet_hall": "Community",
    "church": "Community",
    "mosque": "Community",
    "synagogue": "Community",
    "hindu_temple": "Community",
    "place_of_worship": "Community",
    "city_hall": "Community",
    "local_government_office": "Community",
    "childrens_camp": "Camp",
    "summer_camp": "Camp",
    "day_camp": "Camp",
    "camping_cabin": "Camp",
    "rv_park": "Camp",
}

# First match wins, so more specific keywords come before broad ones ("park").
KEYWORD_TO_CATEGORY = [
    (("indoor playground", "play area", "play space", "playspace", "soft play"), "Playground"),
    (("playground",), "Playground"),
    (
        (
            "amusement park",
            "theme park",
            "water park",
            "trampoline",
            "bounce",
            "laser tag",
            "escape room",
            "arcade",
            "mini golf",
            "miniature golf",
            "go kart",
            "go-kart",
            "bowling",
        ),
        "Amusement",
    ),
    (("zoo", "aquarium"), "Amusement"),
    (("museum", "science center", "discovery center"), "Museum"),
    (("library",), "Library"),
    (
        (
            "theater",
            "theatre",
            "art gallery",
            "gallery",
            "art studio",
            "painting",
            "pottery",
            "ceramics",
            "dance studio",
            "music studio",
            "concert hall",
            "performing arts",
        ),
        "Arts & Culture",
    ),
    (
        (
            "gymnastics",
            "gym",
            "fitness",
            "swimming",
            "pool",
            "skating",
            "ice rink",
            "sports",
            "martial arts",
            "karate",
            "judo",
            "taekwondo",
            "soccer",
            "baseball",
            "basketball",
            "tennis",
            "yoga",
            "rock climbing",
            "climbing gym",
        ),
        "Sports & Fitness",
    ),
    (("recreation center", "rec center"), "Sports & Fitness"),
    (
        (
            "botanical garden",
            "garden",
            "nature center",
            "nature preserve",
            "hiking",
            "trail",
            "beach",
            "wildlife",
        ),
        "Nature",
    ),
    (
        (
            "preschool",
            "pre-school",
            "daycare",
            "day care",
            "childcare",
            "montessori",
            "learning center",
            "education center",
            "tutoring",
            "school",
            "academy",
            "enrichment",
        ),
        "Learning",
    ),
    (("camp", "summer camp", "day camp"), "Camp"),
    (
        ("community center", "community hall", "civic center", "ymca", "ywca", "boys & girls club"),
        "Community",
    ),
    (("park", "regional park", "state park", "national park"), "Park"),
]

LEGACY_TYPE_TO_CATEGORY = {
    "playground": "Playground",
    "indoor playground": "Playground",
    "park": "Park",
    "museum": "Museum",
    "children's museum": "Museum",
    "library": "Library",
    "amusement park": "Amusement",
    "amusement center": "Amusement",
    "zoo": "Amusement",
    "aquarium": "Amusement",
    "escape room": "Amusement",
    "miniature golf": "Amusement",
    "arcade": "Amusement",
    "gymnastics": "Sports & Fitness",
    "recreation center": "Sports & Fitness",
    "pool": "Sports & Fitness",
    "skating rink": "Sports & Fitness",
    "art gallery": "Arts & Culture",
    "painting studio": "Arts & Culture",
    "theater": "Arts & Culture",
    "theatre": "Arts & Culture",
    "studio": "Arts & Culture",
    "garden": "Nature",
    "botanical garden": "Nature",
    "nature center": "Nature",
    "historical landmark": "Nature",
    "tourist attraction": "Nature",
    "visitor center": "Nature",
    "preschool": "Learning",
    "day care": "Learning",
    "daycare": "Learning",
    "education center": "Learning",
    "after school": "Learning",
    "school": "Learning",
    "community center": "Community",
    "convention center": "Community",
    "non-profit": "Community",
    "camp": "Camp",
    "summer camp": "Camp",
    "day camp": "Camp",
    "online": "Other",
    "other": "Other",
}


def category_from_google_type(google_type: str) -> str:
    normalized = google_type.lower().replace("-", "_")
    return GOOGLE_TYPE_TO_CATEGORY.get(normalized, OTHER)


def category_from_google_types(google_types: Iterable[str]) -> str:
    # Google returns types in priority order
    for google_type in google_types:
        category = category_from_google_type(google_type)
        if category != OTHER:
            return category
    return OTHER


def category_from_keywords(text: str) -> str:
    normalized = text.lower()
    for keywords, category in KEYWORD_TO_CATEGORY:
        if any(keyword in normalized for keyword in keywords):
            return category
    return OTHER


def category_from_legacy_type(legacy_type: str) -> str:
    return LEGACY_TYPE_TO_CATEGORY.get(legacy_type.strip().lower(), OTHER)


def determine_category(
    *,
    google_types: Optional[Iterable[str]] = None,
    legacy_place_type: Optional[str] = None,
    venue_name: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    """Resolve a parent category: Google types, then legacy type, then keywords.

    Keyword matching runs over venue name, title and description in that
    order, from most to least specific.
    """
    if google_types:
        category = category_from_google_types(google_types)
        if category != OTHER:
            return category
    if legacy_place_type:
        category = category_from_legacy_type(legacy_place_type)
        if category != OTHER:
            return category
    for text in (venue_name, title, description):
        if text:
            category = category_from_keywords(text)
            if category != OTHER:
                return category
    return OTHER
