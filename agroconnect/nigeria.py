"""Static Nigerian reference data: states, LGAs, crops, grades, certifications."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class State:
    id: int
    name: str
    code: str


@dataclass(frozen=True)
class Lga:
    id: int
    name: str
    state_id: int


NIGERIAN_STATES: tuple[State, ...] = tuple(
    State(index, name, code)
    for index, (name, code) in enumerate(
        [
            ("Abia", "AB"),
            ("Adamawa", "AD"),
            ("Akwa Ibom", "AK"),
            ("Anambra", "AN"),
            ("Bauchi", "BA"),
            ("Bayelsa", "BY"),
            ("Benue", "BE"),
            ("Borno", "BO"),
            ("Cross River", "CR"),
            ("Delta", "DE"),
            ("Ebonyi", "EB"),
            ("Edo", "ED"),
            ("Ekiti", "EK"),
            ("Enugu", "EN"),
            ("Federal Capital Territory", "FC"),
            ("Gombe", "GO"),
            ("Imo", "IM"),
            ("Jigawa", "JI"),
            ("Kaduna", "KD"),
            ("Kano", "KN"),
            ("Katsina", "KT"),
            ("Kebbi", "KE"),
            ("Kogi", "KO"),
            ("Kwara", "KW"),
            ("Lagos", "LA"),
            ("Nasarawa", "NA"),
            ("Niger", "NI"),
            ("Ogun", "OG"),
            ("Ondo", "ON"),
            ("Osun", "OS"),
            ("Oyo", "OY"),
            ("Plateau", "PL"),
            ("Rivers", "RI"),
            ("Sokoto", "SO"),
            ("Taraba", "TA"),
            ("Yobe", "YO"),
            ("Zamfara", "ZA"),
        ],
        start=1,
    )
)

LAGOS_STATE_ID = 25
KANO_STATE_ID = 20

# Only the major LGAs of key states are on record.
MAJOR_LGAS: dict[int, tuple[Lga, ...]] = {
    LAGOS_STATE_ID: tuple(
        Lga(index, name, LAGOS_STATE_ID)
        for index, name in enumerate(
            [
                "Alimosho", "Ajeromi-Ifelodun", "Kosofe", "Mushin", "Oshodi-Isolo",
                "Ojo", "Ikorodu", "Surulere", "Agege", "Ifako-Ijaiye",
                "Shomolu", "Amuwo-Odofin", "Lagos Mainland", "Ikeja", "Eti-Osa",
                "Badagry", "Apapa", "Lagos Island", "Epe", "Ibeju-Lekki",
            ],
            start=1,
        )
    ),
    KANO_STATE_ID: tuple(
        Lga(index, name, KANO_STATE_ID)
        for index, name in enumerate(
            [
                "Fagge", "Dala", "Gwale", "Tarauni", "Ungogo", "Municipal",
                "Dawakin Tofa", "Tofa", "Rimin Gado", "Bagwai", "Gezawa", "Gabasawa",
            ],
            start=21,
        )
    ),
}

MAJOR_CROPS: tuple[str, ...] = (
    "Rice", "Maize", "Cassava", "Yam", "Plantain", "Cocoa", "Palm Oil",
    "Sorghum", "Millet", "Groundnut", "Soybean", "Cowpea", "Sweet Potato",
    "Irish Potato", "Tomato", "Pepper", "Onion", "Garlic", "Ginger",
    "Turmeric", "Cotton", "Sugarcane", "Tobacco", "Kola Nut", "Cashew",
    "Mango", "Orange", "Banana", "Pineapple", "Watermelon", "Melon",
    "Cucumber", "Carrot", "Cabbage", "Lettuce", "Spinach", "Okra",
    "Eggplant", "Green Beans", "Peas",
)

# Crops offered as search filter options.
SEARCH_CROP_TYPES: tuple[str, ...] = MAJOR_CROPS[:19]

CROP_VARIETIES: dict[str, tuple[str, ...]] = {
    "Rice": ("FARO 44", "FARO 52", "FARO 60", "NERICA 1", "NERICA 2", "Local_Variety"),
    "Maize": ("TZEE-W Pop DT STR", "TZEE-Y Pop DT STR", "Local_Variety"),
    "Cassava": ("TME 419", "TMS 30572", "TMS 4(2)1425", "TMS 81/00110", "Local_Variety"),
    "Yam": ("White Yam", "Yellow Yam", "Water Yam", "Chinese Yam", "Local_Variety"),
    "Plantain": ("Horn Plantain", "French Plantain", "False Horn Plantain", "Local_Variety"),
}

QUALITY_GRADES: tuple[str, ...] = ("premium", "grade_a", "grade_b", "grade_c")

CERTIFICATIONS: tuple[str, ...] = ("Organic", "NAFDAC", "SON", "ISO", "HACCP")

CURRENCY = "₦"

_STATES_BY_ID = {state.id: state for state in NIGERIAN_STATES}
_STATES_BY_CODE = {state.code: state for state in NIGERIAN_STATES}


def get_state_by_id(state_id: int) -> Optional[State]:
    return _STATES_BY_ID.get(state_id)


def get_state_by_code(code: str) -> Optional[State]:
    return _STATES_BY_CODE.get(code.upper())


def get_lgas_for_state(state_id: int) -> tuple[Lga, ...]:
    return MAJOR_LGAS.get(state_id, ())


def get_lga_by_id(state_id: int, lga_id: int) -> Optional[Lga]:
    for lga in get_lgas_for_state(state_id):
        if lga.id == lga_id:
            return lga
    return None


def all_lgas() -> list[Lga]:
    """Every LGA on record, ordered by id."""
    return sorted(
        (lga for lgas in MAJOR_LGAS.values() for lga in lgas),
        key=lambda lga: lga.id,
    )
