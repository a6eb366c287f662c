"""Nairobi County constituencies and wards.

Static reference list used to validate tower registrations and to populate
location pickers. It is independent of the filter options derived from
stored towers.
"""

WARDS_BY_CONSTITUENCY: dict[str, tuple[str, ...]] = {
    "Dagoretti North": (
        "Kilimani",
        "Kawangware",
        "Gatina",
        "Kileleshwa",
        "Kabiro",
    ),
    "Dagoretti South": (
        "Mutuini",
        "Ngando",
        "Riruta",
        "Uthiru/Ruthimitu",
        "Waithaka",
    ),
    "Embakasi Central": (
        "Kayole North",
        "Kayole Central",
        "Kayole South",
        "Komarock",
        "Matopeni/Spring Valley",
    ),
    "Embakasi East": (
        "Upper Savanna",
        "Lower Savanna",
        "Embakasi",
        "Utawala",
        "Mihango",
    ),
    "Embakasi North": (
        "Kariobangi North",
        "Dandora Area I",
        "Dandora Area II",
        "Dandora Area III",
        "Dandora Area IV",
    ),
    "Embakasi South": (
        "Imara Daima",
        "Kwa Njenga",
        "Kwa Reuben",
        "Pipeline",
        "Kware",
    ),
    "Embakasi West": (
        "Umoja I",
        "Umoja II",
        "Mowlem",
        "Kariobangi South",
    ),
    "Kamukunji": (
        "Pumwani",
        "Eastleigh North",
        "Eastleigh South",
        "Airbase",
        "California",
    ),
    "Kasarani": (
        "Clay City",
        "Mwiki",
        "Kasarani",
        "Njiru",
        "Ruai",
    ),
    "Kibra": (
        "Laini Saba",
        "Lindi",
        "Makina",
        "Woodley/Kenyatta Golf Course",
        "Sarangombe",
    ),
    "Langata": (
        "Karen",
        "Nairobi West",
        "Mugumo-Ini",
        "South C",
        "Nyayo Highrise",
    ),
    "Makadara": (
        "Maringo/Hamza",
        "Viwandani",
        "Harambee",
        "Makongeni",
    ),
    "Mathare": (
        "Hospital",
        "Mabatini",
        "Huruma",
        "Ngei",
        "Mlango Kubwa",
        "Kiamaiko",
    ),
    "Roysambu": (
        "Githurai",
        "Kahawa West",
        "Zimmerman",
        "Roysambu",
        "Kahawa",
    ),
    "Ruaraka": (
        "Baba Dogo",
        "Utalii",
        "Mathare North",
        "Lucky Summer",
        "Korogocho",
    ),
    "Starehe": (
        "Nairobi Central",
        "Ngara",
        "Pangani",
        "Ziwani/Kariokor",
        "Landimawe",
        "Nairobi South",
    ),
    "Westlands": (
        "Kitisuru",
        "Parklands/Highridge",
        "Karura",
        "Kangemi",
        "Mountain View",
    ),
}

CONSTITUENCIES: tuple[str, ...] = tuple(WARDS_BY_CONSTITUENCY)

WARD_TO_CONSTITUENCY: dict[str, str] = {
    ward: constituency for constituency, wards in WARDS_BY_CONSTITUENCY.items() for ward in wards
}


def wards_for_constituency(constituency: str) -> list[str]:
    """Return the wards of a constituency, or an empty list if it is unknown."""
    return list(WARDS_BY_CONSTITUENCY.get(constituency, ()))


def is_valid_location(constituency: str, ward: str) -> bool:
    """Return True if the ward belongs to the constituency."""
    return WARD_TO_CONSTITUENCY.get(ward) == constituency


def location_errors(constituency: str, ward: str) -> list[dict[str, list[str] | str]]:
    """Describe why a constituency/ward pair is not in the reference list.

    Returns:
        Field errors as ``{"path": [...], "message": str}``; empty when valid.
    """
    if constituency not in WARDS_BY_CONSTITUENCY:
        return [{"path": ["constituency"], "message": f"Unknown constituency: {constituency}"}]
    if not is_valid_location(constituency, ward):
        return [{"path": ["ward"], "message": f"Ward {ward} is not in constituency {constituency}"}]
    return []
