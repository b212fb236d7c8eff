"""Reference US cities. Populations are city-proper 2020 census figures."""

from __future__ import annotations

from cityscope.geo import GeoPoint
from cityscope.models import City

_ET = "America/New_York"
_CT = "America/Chicago"
_MT = "America/Denver"
_PT = "America/Los_Angeles"


def _city(id, name, display_name, lat, lng, radius, population, timezone, state, market_id=None):
    return City(
        id=id,
        name=name,
        display_name=display_name,
        center=GeoPoint(lat, lng),
        radius=radius,
        population=population,
        timezone=timezone,
        state=state,
        market_id=market_id,
    )


US_CITIES: tuple[City, ...] = (
    # Top metros
    _city("new-york", "New York", "NYC", 40.7128, -74.0060, 30, 8_336_817, _ET, "NY", "35"),
    _city("los-angeles", "Los Angeles", "LA", 34.0522, -118.2437, 35, 3_898_747, _PT, "CA", "27"),
    _city("chicago", "Chicago", "Chicago", 41.8781, -87.6298, 25, 2_746_388, _CT, "IL", "8"),
    _city("houston", "Houston", "Houston", 29.7604, -95.3698, 30, 2_304_580, _CT, "TX", "18"),
    _city("phoenix", "Phoenix", "Phoenix", 33.4484, -112.0740, 25, 1_608_139, "America/Phoenix", "AZ", "17"),
    _city("philadelphia", "Philadelphia", "Philly", 39.9526, -75.1652, 20, 1_603_797, _ET, "PA", "29"),
    _city("san-antonio", "San Antonio", "San Antonio", 29.4241, -98.4936, 20, 1_434_625, _CT, "TX", "59"),
    _city("san-diego", "San Diego", "San Diego", 32.7157, -117.1611, 25, 1_386_932, _PT, "CA", "37"),
    _city("dallas", "Dallas", "Dallas", 32.7767, -96.7970, 30, 1_304_379, _CT, "TX", "11"),
    _city("san-jose", "San Jose", "Bay Area", 37.3382, -121.8863, 25, 1_013_240, _PT, "CA", "41"),

    # Large cities
    _city("austin", "Austin", "Austin", 30.2672, -97.7431, 25, 961_855, _CT, "TX", "50"),
    _city("jacksonville", "Jacksonville", "Jacksonville", 30.3322, -81.6557, 25, 949_611, _ET, "FL", "15"),
    _city("fort-worth", "Fort Worth", "Fort Worth", 32.7555, -97.3308, 20, 918_915, _CT, "TX", "11"),
    _city("columbus", "Columbus", "Columbus", 39.9612, -82.9988, 20, 905_748, _ET, "OH", "9"),
    _city("indianapolis", "Indianapolis", "Indy", 39.7684, -86.1581, 20, 887_642, "America/Indiana/Indianapolis", "IN", "14"),
    _city("charlotte", "Charlotte", "Charlotte", 35.2271, -80.8431, 25, 874_579, _ET, "NC", "6"),
    _city("san-francisco", "San Francisco", "SF", 37.7749, -122.4194, 20, 873_965, _PT, "CA", "26"),
    _city("seattle", "Seattle", "Seattle", 47.6062, -122.3321, 25, 737_015, _PT, "WA", "49"),
    _city("denver", "Denver", "Denver", 39.7392, -104.9903, 25, 715_522, _MT, "CO", "12"),
    _city("washington-dc", "Washington", "DC", 38.9072, -77.0369, 25, 689_545, _ET, "DC", "2"),
    _city("nashville", "Nashville", "Nashville", 36.1627, -86.7816, 25, 689_447, _CT, "TN", "24"),
    _city("oklahoma-city", "Oklahoma City", "OKC", 35.4676, -97.5164, 25, 681_054, _CT, "OK", "28"),
    _city("el-paso", "El Paso", "El Paso", 31.7619, -106.4850, 20, 678_815, _MT, "TX", "56"),
    _city("boston", "Boston", "Boston", 42.3601, -71.0589, 20, 675_647, _ET, "MA", "3"),
    _city("portland", "Portland", "Portland", 45.5152, -122.6784, 25, 652_503, _PT, "OR", "32"),
    _city("las-vegas", "Las Vegas", "Las Vegas", 36.1699, -115.1398, 20, 641_903, _PT, "NV", "20"),
    _city("detroit", "Detroit", "Detroit", 42.3314, -83.0458, 25, 639_111, "America/Detroit", "MI", "13"),
    _city("memphis", "Memphis", "Memphis", 35.1495, -90.0490, 20, 633_104, _CT, "TN", "22"),
    _city("louisville", "Louisville", "Louisville", 38.2527, -85.7585, 20, 617_638, "America/Kentucky/Louisville", "KY", "19"),
    _city("baltimore", "Baltimore", "Baltimore", 39.2904, -76.6122, 20, 585_708, _ET, "MD", "2"),
    _city("milwaukee", "Milwaukee", "Milwaukee", 43.0389, -87.9065, 20, 577_222, _CT, "WI", "23"),
    _city("albuquerque", "Albuquerque", "Albuquerque", 35.0844, -106.6504, 25, 564_559, _MT, "NM", "60"),
    _city("tucson", "Tucson", "Tucson", 32.2226, -110.9747, 20, 542_629, "America/Phoenix", "AZ", "52"),
    _city("fresno", "Fresno", "Fresno", 36.7378, -119.7871, 20, 542_107, _PT, "CA", "55"),
    _city("sacramento", "Sacramento", "Sacramento", 38.5816, -121.4944, 20, 524_943, _PT, "CA", "36"),
    _city("kansas-city", "Kansas City", "KC", 39.0997, -94.5786, 20, 508_090, _CT, "MO", "16"),
    _city("atlanta", "Atlanta", "Atlanta", 33.7490, -84.3880, 30, 498_715, _ET, "GA", "1"),
    _city("omaha", "Omaha", "Omaha", 41.2565, -95.9345, 20, 486_051, _CT, "NE", "61"),
    _city("raleigh", "Raleigh", "Raleigh", 35.7796, -78.6382, 20, 467_665, _ET, "NC", "33"),
    _city("miami", "Miami", "Miami", 25.7617, -80.1918, 25, 442_241, _ET, "FL", "21"),
    _city("minneapolis", "Minneapolis", "Twin Cities", 44.9778, -93.2650, 25, 429_954, _CT, "MN", "10"),
    _city("tulsa", "Tulsa", "Tulsa", 36.1540, -95.9928, 20, 413_066, _CT, "OK"),
    _city("bakersfield", "Bakersfield", "Bakersfield", 35.3733, -119.0187, 20, 403_455, _PT, "CA", "54"),
    _city("wichita", "Wichita", "Wichita", 37.6872, -97.3301, 20, 397_532, _CT, "KS", "58"),
    _city("tampa", "Tampa", "Tampa Bay", 27.9506, -82.4572, 20, 384_959, _ET, "FL", "46"),
    _city("new-orleans", "New Orleans", "NOLA", 29.9511, -90.0715, 20, 383_997, _CT, "LA", "25"),
    _city("cleveland", "Cleveland", "Cleveland", 41.4993, -81.6944, 20, 372_624, _ET, "OH", "7"),
    _city("honolulu", "Honolulu", "Honolulu", 21.3099, -157.8581, 20, 350_964, "Pacific/Honolulu", "HI", "53"),
    _city("lexington", "Lexington", "Lexington", 38.0406, -84.5037, 20, 322_570, _ET, "KY", "62"),
    _city("corpus-christi", "Corpus Christi", "Corpus Christi", 27.8006, -97.3964, 20, 317_863, _CT, "TX", "57"),
    _city("orlando", "Orlando", "Orlando", 28.5383, -81.3792, 20, 307_573, _ET, "FL", "44"),
    _city("pittsburgh", "Pittsburgh", "Pittsburgh", 40.4406, -79.9959, 20, 302_971, _ET, "PA", "31"),
    _city("st-louis", "St. Louis", "St. Louis", 38.6270, -90.1994, 20, 301_578, _CT, "MO", "45"),
    _city("anchorage", "Anchorage", "Anchorage", 61.2181, -149.9003, 30, 291_247, "America/Anchorage", "AK", "63"),
    _city("buffalo", "Buffalo", "Buffalo", 42.8864, -78.8784, 20, 278_349, _ET, "NY", "4"),
    _city("reno", "Reno", "Reno", 39.5296, -119.8138, 20, 264_165, _PT, "NV", "34"),
    _city("lubbock", "Lubbock", "Lubbock", 33.5779, -101.8552, 20, 257_141, _CT, "TX", "64"),
    _city("boise", "Boise", "Boise", 43.6150, -116.2023, 25, 235_684, "America/Boise", "ID", "66"),
    _city("spokane", "Spokane", "Spokane", 47.6588, -117.4260, 20, 228_989, _PT, "WA", "32"),
    _city("baton-rouge", "Baton Rouge", "Baton Rouge", 30.4515, -91.1871, 20, 227_470, _CT, "LA", "65"),
    _city("richmond", "Richmond", "Richmond", 37.5407, -77.4360, 20, 226_610, _ET, "VA", "38"),
    _city("des-moines", "Des Moines", "Des Moines", 41.5868, -93.6250, 20, 214_133, _CT, "IA", "68"),
    _city("birmingham", "Birmingham", "Birmingham", 33.5186, -86.8104, 20, 200_733, _CT, "AL", "67"),
    _city("salt-lake-city", "Salt Lake City", "SLC", 40.7608, -111.8910, 25, 199_723, _MT, "UT"),

    # Smaller cities, served by a nearby market
    _city("fort-lauderdale", "Fort Lauderdale", "Fort Lauderdale", 26.1224, -80.1373, 15, 182_760, _ET, "FL", "21"),
    _city("fargo", "Fargo", "Fargo", 46.8772, -96.7898, 25, 125_990, _CT, "ND"),
    _city("ann-arbor", "Ann Arbor", "Ann Arbor", 42.2808, -83.7430, 15, 123_851, "America/Detroit", "MI", "13"),
    _city("billings", "Billings", "Billings", 45.7833, -108.5007, 30, 117_116, _MT, "MT"),
    _city("boulder", "Boulder", "Boulder", 40.0150, -105.2705, 15, 108_250, _MT, "CO", "12"),
    _city("cheyenne", "Cheyenne", "Cheyenne", 41.1400, -104.8202, 25, 65_132, _MT, "WY"),
)

CITY_EMOJI: dict[str, str] = {
    "new-york": "🗽",
    "los-angeles": "🌴",
    "chicago": "🏙️",
    "houston": "🚀",
    "phoenix": "🌵",
    "philadelphia": "🔔",
    "san-antonio": "🤠",
    "san-diego": "🏖️",
    "dallas": "🤠",
    "san-jose": "💻",
    "atlanta": "🍑",
    "miami": "🏖️",
    "denver": "⛰️",
    "seattle": "☕",
    "las-vegas": "🎰",
}
