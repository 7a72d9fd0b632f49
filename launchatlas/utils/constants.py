"""Constants and static configuration for launch and orbit processing.

All distances use km unless otherwise noted. Screen-space quantities
are in pixels. The site dictionary and field alias lists are configuration:
they are never derived from the data.
"""

import math

# --- Earth Shape (WGS84) ---
R_EARTH_EQUATORIAL: float = 6378.137  # km -- semi-major axis

# --- Derived Math Constants ---
TWO_PI: float = 2.0 * math.pi
DEG_TO_RAD: float = math.pi / 180.0

# --- Orbit Classification Thresholds ---
LEO_MAX_ALT: float = 2000.0  # km
GEO_ALT: float = 35786.0  # km
GEO_ALT_TOLERANCE: float = 1000.0  # km
ELLIPTICAL_MIN_ECCENTRICITY: float = 0.25

# --- Ellipse Rendering ---
MIN_ELLIPSE_RADIUS_PX: float = 1.5
DEFAULT_VIEWPORT: tuple[int, int] = (1100, 720)
ORBIT_MARGIN_PX: float = 20.0
ELLIPSE_OUTLINE_POINTS: int = 180

# --- Orbit Animation (radians per tick) ---
BASE_ANGULAR_SPEED: float = 0.05
REFERENCE_SEMI_MAJOR_PX: float = 50.0
MIN_ANGULAR_SPEED: float = 0.002
MAX_ANGULAR_SPEED: float = 0.2
GOLDEN_ANGLE: float = math.pi * (3.0 - math.sqrt(5.0))

# --- Scheduler Cadences ---
FRAME_INTERVAL_MS: int = 33  # ~30 FPS
PLAYBACK_INTERVAL_MS: int = 500  # ms per year

# --- Launch Metrics ---
METRIC_RADIUS_MIN_PX: float = 3.0
METRIC_RADIUS_MAX_PX: float = 50.0

# --- Site Map ---
SITE_RADIUS_MAX_PX: float = 35.0
SITE_KEY_DECIMALS: int = 4
UNKNOWN_SITE_NAME: str = "Unknown site"
UNKNOWN_COUNTRY: str = "Unknown"

# --- Field Aliases (first non-empty match wins, in order) ---
SITE_NAME_FIELDS: tuple[str, ...] = (
    "launch_site",
    "Launch Site",
    "Launch_Site",
    "Site",
)
LAUNCH_DATE_FIELDS: tuple[str, ...] = (
    "date_of_launch",
    "Date of Launch",
    "Launch_Date",
    "Launch Date",
    "Date",
)
OWNER_FIELDS: tuple[str, ...] = (
    "owner",
    "ownership",
    "users",
    "Users",
    "operator/owner",
    "Operator/Owner",
)
# Government-vs-commercial series reads its own aliases.
OWNERSHIP_DATE_FIELDS: tuple[str, ...] = (
    "date_of_launch",
    "Date of Launch",
    "Launch Date",
    "Launch_Date",
    "Launch Date (UTC)",
    "Date",
)
OWNERSHIP_OWNER_FIELDS: tuple[str, ...] = (
    "owner",
    "ownership",
    "users",
    "operator/owner",
    "Operator/Owner",
    "Users",
)
SITE_LAT_FIELDS: tuple[str, ...] = (
    "Launch_Site_Lat",
    "Launch Site Lat",
    "Launch Site Latitude",
    "site_lat",
    "lat",
    "Latitude",
)
SITE_LON_FIELDS: tuple[str, ...] = (
    "Launch_Site_Lon",
    "Launch Site Lon",
    "Launch Site Longitude",
    "site_lon",
    "lon",
    "Longitude",
)
SITE_COUNTRY_FIELDS: tuple[str, ...] = (
    "Launch_Site_Country",
    "Launch Site Country",
    "site_country",
)
VEHICLE_FIELDS: tuple[str, ...] = (
    "launch_vehicle",
    "Launch Vehicle",
    "Launch_Vehicle",
    "Vehicle",
)
SATELLITE_NAME_FIELDS: tuple[str, ...] = (
    "Current Official Name of Satellite",
    "Name of Satellite, Alternate Names",
    "satellite_name",
    "Satellite",
    "name",
    "Name",
)
ORBIT_CLASS_FIELDS: tuple[str, ...] = (
    "Class of Orbit",
    "class_of_orbit",
    "Orbit_Class",
    "orbit_class",
)
PERIGEE_FIELDS: tuple[str, ...] = ("Perigee (km)", "Perigee_km", "perigee_km", "perigee")
APOGEE_FIELDS: tuple[str, ...] = ("Apogee (km)", "Apogee_km", "apogee_km", "apogee")
INCLINATION_FIELDS: tuple[str, ...] = (
    "Inclination (degrees)",
    "Inclination_deg",
    "inclination_deg",
    "inclination",
)
ECCENTRICITY_FIELDS: tuple[str, ...] = ("Eccentricity", "eccentricity")
METRIC_YEAR_FIELDS: tuple[str, ...] = ("year", "Year") + LAUNCH_DATE_FIELDS
LAUNCH_MASS_FIELDS: tuple[str, ...] = (
    "avg_launch_mass_kg",
    "Launch Mass (kg.)",
    "Launch Mass (kg)",
    "launch_mass_kg",
)
POWER_FIELDS: tuple[str, ...] = (
    "avg_power_watts",
    "Power (watts)",
    "Power (W)",
    "power_watts",
)

# --- Ownership Indicators (case-insensitive regex fragments) ---
OWNER_TOKEN_SEPARATORS: str = r"[;,/]+"
GOVERNMENT_INDICATOR: str = (
    r"gov|\bnasa\b|\besa\b|\bjaxa\b|\bisro\b|roscosmos|\bcnsa\b|\bnoaa\b"
    r"|\bdlr\b|\bcnes\b|\basi\b|\bkari\b|\bcsa\b|ministry|agency"
)
COMMERCIAL_INDICATOR: str = (
    r"com|spacex|\binc\b|\bllc\b|\bltd\b|\bcorp(oration)?\b|\bplc\b|\bgmbh\b"
    r"|oneweb|planet labs|iridium|intelsat|\bses\b"
)
MILITARY_INDICATOR: str = r"military|defen[cs]e|\barmy\b|\bnavy\b|air force"

# --- Launch Site Dictionary ---
# (pattern, lon, lat, canonical name, country). First match wins, so
# specific patterns must precede broader ones.
SITE_DICTIONARY: tuple[tuple[str, float, float, str, str], ...] = (
    (r"\b(kourou|guiana)\b", -52.768, 5.239, "Guiana Space Center", "France"),
    (r"\bcape\s*canaveral|kennedy\b", -80.605, 28.396, "Cape Canaveral / KSC", "USA"),
    (r"\bvandenberg\b", -120.611, 34.632, "Vandenberg", "USA"),
    (r"\bbaikonur\b", 63.305, 45.964, "Baikonur Cosmodrome", "Kazakhstan"),
    (r"\bplesetsk\b", 40.577, 62.925, "Plesetsk Cosmodrome", "Russia"),
    (r"\bjiuquan\b", 100.298, 40.960, "Jiuquan SLC", "China"),
    (r"\bxichang\b", 102.026, 28.246, "Xichang SLC", "China"),
    (r"\btaiyuan\b", 111.608, 38.846, "Taiyuan SLC", "China"),
    (r"\bwenchang\b", 110.951, 19.614, "Wenchang SLS", "China"),
    (r"\btanegashima\b", 130.957, 30.375, "Tanegashima", "Japan"),
    (r"\buchinoura|kagoshima\b", 131.081, 31.251, "Uchinoura", "Japan"),
    (r"\bsvobodny|vostochny\b", 128.12, 51.42, "Svobodny/Vostochny", "Russia"),
    (r"\bsatish|sriharikota|shar\b", 80.235, 13.733, "Satish Dhawan (Sriharikota)", "India"),
    (r"\bnaro\b", 127.535, 34.431, "Naro", "South Korea"),
    (r"\bwallops\b", -75.466, 37.940, "Wallops", "USA"),
    (r"\bkodiak|psca\b", -152.339, 57.435, "Kodiak (PSCA)", "USA"),
    (r"\bmah[ií]a|rocket\s*lab|lc-1\b", 177.865, -39.262, "LC-1 Mahia", "New Zealand"),
    (r"\bdombarov|yasny\b", 59.533, 50.803, "Dombarovsky (Yasny)", "Russia"),
    (r"\bsea\s*launch|odyssey\b", -154.0, 0.0, "Sea Launch (equator)", "International"),
)

# --- Dataset Sources ---
DEFAULT_DATASET_FILE: str = "sample_launches.csv"
DATASET_CACHE_DIRNAME: str = "dataset_cache"
