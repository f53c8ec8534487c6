"""
db/catalog_data.py
-------------------
Seed catalog: the parks the planner knows about and their activities.

The catalog is static and read-only. load_default_catalog() builds fresh
immutable records on every call so each EntityStore owns its own copy.
Ids are assigned in declaration order starting at 1 (parks and
activities are numbered independently).
"""

from __future__ import annotations

from typing import Any

from schemas.catalog import Difficulty, MonthlyWeather, Park, ParkActivity

# ── Parks ──────────────────────────────────────────────────────────────────────

_PARKS: list[dict[str, Any]] = [
    {
        "name": "Yosemite National Park",
        "state": "California",
        "description": (
            "Yosemite National Park is in California's Sierra Nevada mountains. "
            "It's famed for its giant, ancient sequoia trees, and for Tunnel View, "
            "the iconic vista of towering Bridalveil Fall and the granite cliffs of "
            "El Capitan and Half Dome."
        ),
        "image_url": "https://images.unsplash.com/photo-1576181256399-834e3b3a49bf?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80",
        "latitude": "37.8651",
        "longitude": "-119.5383",
        "rating": "4.9",
        "review_count": 2341,
        "activities": ("Hiking", "Photography", "Waterfalls", "Biking", "Camping", "Scenic Views"),
        "weather": {"may": ("71°F", "42°F", '1.3"')},
        "highlights": (
            "Waterfalls at Peak Flow", "Wildflower Blooms", "Mild Temperatures",
            "Wildlife Viewing", "Fewer Crowds (Weekdays)",
        ),
        "best_months": ("May", "June", "September"),
        "monthly_notes": {
            "may": "May offers ideal conditions with peak waterfall flow and blooming wildflowers.",
        },
    },
    {
        "name": "Grand Canyon National Park",
        "state": "Arizona",
        "description": (
            "The Grand Canyon is a steep-sided canyon carved by the Colorado River in "
            "Arizona. For thousands of years, the Grand Canyon and its surrounding areas "
            "have been continuously inhabited by Native Americans."
        ),
        "image_url": "https://images.unsplash.com/photo-1527833172401-482728b8a56c?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80",
        "latitude": "36.0544",
        "longitude": "-112.2583",
        "rating": "4.8",
        "review_count": 3256,
        "activities": ("Hiking", "Photography", "Scenic Views", "Rafting", "Camping", "Wildlife Viewing"),
        "weather": {"may": ("75°F", "43°F", '0.5"')},
        "highlights": (
            "Scenic Vistas", "Moderate Temperatures", "South Rim Accessibility",
            "Sunset Photography", "Hiking Trails",
        ),
        "best_months": ("April", "May", "September", "October"),
        "monthly_notes": {
            "may": (
                "May is a perfect time to visit as temperatures are moderate and the "
                "crowds are smaller than summer months."
            ),
        },
    },
    {
        "name": "Arches National Park",
        "state": "Utah",
        "description": (
            "Arches National Park is a national park in eastern Utah. The park is known "
            "for preserving over 2,000 natural sandstone arches, including the "
            "world-famous Delicate Arch, as well as a variety of unique geological "
            "resources and formations."
        ),
        "image_url": "https://images.unsplash.com/photo-1583398561012-8645a7e5b399?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80",
        "latitude": "38.7331",
        "longitude": "-109.5925",
        "rating": "4.7",
        "review_count": 1892,
        "activities": ("Rock Formations", "Photography", "Hiking", "Stargazing", "Scenic Drives", "Rock Climbing"),
        "weather": {"may": ("82°F", "50°F", '0.7"')},
        "highlights": ("Delicate Arch", "Balanced Rock", "Landscape Arch", "Devils Garden", "Fiery Furnace"),
        "best_months": ("April", "May", "September", "October"),
        "monthly_notes": {
            "may": "May offers pleasant temperatures for hiking and ideal lighting conditions for photography.",
        },
    },
    {
        "name": "Zion National Park",
        "state": "Utah",
        "description": (
            "Zion National Park is a southwest Utah nature preserve distinguished by "
            "Zion Canyon's steep red cliffs. Zion Canyon Scenic Drive cuts through its "
            "main section, leading to forest trails along the Virgin River."
        ),
        "image_url": "https://images.unsplash.com/photo-1554482687-7cea9088cb0c?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80",
        "latitude": "37.2982",
        "longitude": "-113.0263",
        "rating": "4.8",
        "review_count": 2735,
        "activities": ("Hiking", "Canyoneering", "Rock Climbing", "Photography", "Bird Watching", "Wildflowers"),
        "weather": {"may": ("78°F", "47°F", '0.8"')},
        "highlights": ("Canyons", "Wildflowers", "Angels Landing", "The Narrows", "Emerald Pools"),
        "best_months": ("April", "May", "June", "September", "October"),
        "monthly_notes": {
            "may": "May is perfect for wildflower viewing and hiking with moderate temperatures.",
        },
    },
    {
        "name": "Great Smoky Mountains National Park",
        "state": "Tennessee/North Carolina",
        "description": (
            "Great Smoky Mountains National Park straddles the border of North Carolina "
            "and Tennessee. The sprawling landscape encompasses lush forests and an "
            "abundance of wildflowers that bloom year-round."
        ),
        "image_url": "https://images.unsplash.com/photo-1609867002727-5d6b89c736e4?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80",
        "latitude": "35.6131",
        "longitude": "-83.5532",
        "rating": "4.7",
        "review_count": 3421,
        "activities": ("Hiking", "Wildlife Viewing", "Fishing", "Camping", "Scenic Drives", "Photography"),
        "weather": {"may": ("70°F", "50°F", '4.5"')},
        "highlights": ("Spring Foliage", "Wildlife", "Cades Cove", "Waterfall Trails", "Wildflowers"),
        "best_months": ("May", "June", "October"),
        "monthly_notes": {
            "may": "May showcases beautiful spring foliage and active wildlife throughout the park.",
        },
    },
]

# ── Park activities ────────────────────────────────────────────────────────────
# Keyed by 1-based park position in _PARKS.
# tuple: (name, category, duration_min, difficulty, lat, lon, best_time, best_months, description)

_ACTIVITIES: dict[int, list[tuple]] = {
    1: [
        ("Mist Trail to Vernal Fall", "Hiking", 180, Difficulty.moderate, "37.7270", "-119.5443",
         "morning", ("May", "June"), "Granite staircase climbing beside Vernal Fall, drenched in spray at peak flow."),
        ("Tunnel View", "Scenic Views", 45, Difficulty.easy, "37.7159", "-119.6773",
         "sunset", (), "Classic overlook of El Capitan, Half Dome and Bridalveil Fall."),
        ("Glacier Point", "Scenic Views", 90, Difficulty.easy, "37.7281", "-119.5738",
         "sunset", ("June", "September"), "Panoramic viewpoint 3,200 feet above Yosemite Valley."),
        ("Mariposa Grove of Giant Sequoias", "Hiking", 150, Difficulty.easy, "37.5142", "-119.6013",
         "morning", (), "Walk among more than 500 mature giant sequoias including the Grizzly Giant."),
        ("Yosemite Valley Bike Loop", "Biking", 120, Difficulty.easy, "37.7456", "-119.5936",
         "afternoon", ("May", "June", "September"), "Flat paved loop past meadows, the Merced River and valley landmarks."),
        ("Half Dome Cables", "Hiking", 600, Difficulty.difficult, "37.7459", "-119.5332",
         "morning", ("June", "September"), "Permit-only summit climb up the steel cables of Half Dome."),
        ("Valley Floor Photography Walk", "Photography", 90, Difficulty.easy, "37.7390", "-119.5730",
         "morning", (), "Early light on Yosemite Falls and Cook's Meadow reflections."),
    ],
    2: [
        ("Bright Angel Trail to 1.5 Mile Resthouse", "Hiking", 240, Difficulty.moderate, "36.0579", "-112.1440",
         "morning", ("April", "May", "October"), "Steep descent below the rim with views of layered canyon walls."),
        ("Hermit Road Shuttle Overlooks", "Scenic Views", 150, Difficulty.easy, "36.0664", "-112.2120",
         "afternoon", (), "Hop-on shuttle along nine rim overlooks west of the village."),
        ("Mather Point Sunrise", "Photography", 60, Difficulty.easy, "36.0617", "-112.1077",
         "sunrise", (), "First light across the canyon from the most accessible overlook."),
        ("Desert View Watchtower", "Scenic Views", 90, Difficulty.easy, "36.0442", "-111.8261",
         "afternoon", (), "Mary Colter's stone tower with views of the Colorado River bend."),
        ("Rim Trail Wildlife Walk", "Wildlife Viewing", 120, Difficulty.easy, "36.0575", "-112.1380",
         "evening", (), "Paved rim path with elk, condors and mule deer sightings."),
        ("South Kaibab to Ooh Aah Point", "Hiking", 120, Difficulty.moderate, "36.0530", "-112.0840",
         "morning", ("April", "May", "September", "October"), "Short ridge hike with sweeping eastern canyon views."),
    ],
    3: [
        ("Delicate Arch Trail", "Hiking", 180, Difficulty.moderate, "38.7436", "-109.4993",
         "sunset", ("April", "May", "September", "October"), "Slickrock climb to Utah's most famous freestanding arch."),
        ("Balanced Rock Loop", "Rock Formations", 30, Difficulty.easy, "38.7011", "-109.5647",
         "afternoon", (), "Short loop around a 128-foot balanced boulder."),
        ("Windows Section", "Rock Formations", 60, Difficulty.easy, "38.6875", "-109.5370",
         "morning", (), "North and South Window and Turret Arch on an easy loop."),
        ("Devils Garden Primitive Loop", "Hiking", 300, Difficulty.difficult, "38.7827", "-109.5950",
         "morning", ("April", "October"), "Fin scrambling past Landscape, Partition and Double O arches."),
        ("Park Avenue Scenic Drive", "Scenic Drives", 60, Difficulty.easy, "38.6175", "-109.6197",
         "afternoon", (), "Drive and short walk among towering sandstone walls."),
        ("Night Sky Program at Panorama Point", "Stargazing", 90, Difficulty.easy, "38.7003", "-109.5598",
         "evening", ("May", "September"), "Ranger-led stargazing in a certified dark sky park."),
    ],
    4: [
        ("Angels Landing", "Hiking", 300, Difficulty.difficult, "37.2692", "-112.9476",
         "morning", ("April", "May", "October"), "Chain-assisted ridge climb above Zion Canyon (permit required)."),
        ("The Narrows Bottom-Up", "Hiking", 360, Difficulty.difficult, "37.2853", "-112.9477",
         "morning", ("June", "September"), "Wade the Virgin River between thousand-foot canyon walls."),
        ("Emerald Pools Trail", "Hiking", 120, Difficulty.moderate, "37.2513", "-112.9521",
         "afternoon", ("May",), "Hanging gardens and waterfalls above three pools."),
        ("Riverside Walk", "Wildflowers", 90, Difficulty.easy, "37.2848", "-112.9475",
         "morning", ("April", "May"), "Paved riverside path lined with spring wildflowers."),
        ("Canyon Overlook Trail", "Photography", 60, Difficulty.easy, "37.2131", "-112.9410",
         "sunrise", (), "Short ledge trail with a view down Pine Creek Canyon."),
        ("Watchman Trail Birding", "Bird Watching", 120, Difficulty.easy, "37.1990", "-112.9857",
         "evening", ("April", "May"), "Low-elevation trail good for canyon wrens and peregrines."),
    ],
    5: [
        ("Cades Cove Loop Road", "Scenic Drives", 240, Difficulty.easy, "35.5908", "-83.8465",
         "morning", ("May", "June", "October"), "Eleven-mile loop through historic farmsteads and wildlife meadows."),
        ("Alum Cave Trail", "Hiking", 240, Difficulty.moderate, "35.6294", "-83.4510",
         "morning", ("May", "October"), "Creekside climb to Arch Rock and the Alum Cave bluffs."),
        ("Clingmans Dome Observation Tower", "Scenic Views", 60, Difficulty.moderate, "35.5628", "-83.4985",
         "sunset", ("May", "June", "October"), "Highest point in the park with a 360-degree view."),
        ("Laurel Falls Trail", "Hiking", 120, Difficulty.easy, "35.6783", "-83.5811",
         "afternoon", ("May",), "Paved trail to an 80-foot, two-tiered waterfall."),
        ("Little River Fly Fishing", "Fishing", 180, Difficulty.moderate, "35.6620", "-83.6120",
         "morning", ("May", "June"), "Wild trout water along the Little River Road."),
        ("Elkmont Synchronous Fireflies", "Wildlife Viewing", 120, Difficulty.easy, "35.6550", "-83.5810",
         "evening", ("June",), "Lottery-based evening viewing of synchronized firefly displays."),
    ],
}


def _build_park(park_id: int, raw: dict[str, Any]) -> Park:
    weather = {
        month: MonthlyWeather(high=high, low=low, precipitation=precip)
        for month, (high, low, precip) in raw["weather"].items()
    }
    return Park(
        id=park_id,
        name=raw["name"],
        state=raw["state"],
        description=raw["description"],
        image_url=raw["image_url"],
        latitude=raw["latitude"],
        longitude=raw["longitude"],
        rating=raw["rating"],
        review_count=raw["review_count"],
        activities=tuple(raw["activities"]),
        weather=weather,
        highlights=tuple(raw["highlights"]),
        best_months=tuple(raw["best_months"]),
        monthly_notes=dict(raw["monthly_notes"]),
    )


def load_default_catalog() -> tuple[list[Park], list[ParkActivity]]:
    """Return (parks, activities) for the seed catalog."""
    parks = [_build_park(i, raw) for i, raw in enumerate(_PARKS, start=1)]

    activities: list[ParkActivity] = []
    next_id = 1
    for park in parks:
        for (name, category, duration, difficulty, lat, lon,
             best_time, best_months, description) in _ACTIVITIES.get(park.id, []):
            activities.append(ParkActivity(
                id=next_id,
                park_id=park.id,
                name=name,
                description=description,
                category=category,
                duration_minutes=duration,
                difficulty=difficulty,
                latitude=lat,
                longitude=lon,
                best_time_of_day=best_time,
                best_months=tuple(best_months),
            ))
            next_id += 1
    return parks, activities
