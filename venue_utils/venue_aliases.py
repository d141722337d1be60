# Known venue name variations and their canonical display names.
# Keys are matched after normalize_venue_key, so case and accents do not matter here.
DEFAULT_VENUE_ALIASES = {
    # Chilli Street Club
    "chilli street club": "Chilli Street Club",
    "chilli": "Chilli Street Club",
    "chilli street": "Chilli Street Club",
    "csc": "Chilli Street Club",

    # La Estación
    "la estacion": "La Estación Córdoba",
    "la estacion cordoba": "La Estación Córdoba",
    "estacion": "La Estación Córdoba",
    "la estacion outdoor": "La Estación Córdoba - Outdoor",
    "la estacion indoor": "La Estación Córdoba - Indoor",

    # Cazona
    "cazona": "Cazona Casa Club",
    "cazona casa club": "Cazona Casa Club",
    "cazona casa": "Cazona Casa Club",

    # Lola Cruz
    "lola cruz": "Lola Cruz Club",
    "lola cruz club": "Lola Cruz Club",

    # Canario
    "canario disco": "Canario Disco",
    "canario": "Canario Disco",

    "teatro real": "Teatro Real",
    "teatro municipal": "Teatro Municipal",
    "anfiteatro municipal": "Anfiteatro Municipal",
    "anfiteatro": "Anfiteatro Municipal",
    "centro cultural": "Centro Cultural",
    "estancia pizzarro": "Estancia Pizzarro ex Natal Crespo",
    "estancia": "Estancia Pizzarro ex Natal Crespo",

    # Online
    "online": "Online",
    "streaming": "Online - Streaming",
    "virtual": "Online",

    # Placeholders
    "unknown": "Unknown Venue",
    "tbd": "To Be Determined",
    "por confirmar": "To Be Determined",
    "venue desconocido": "Unknown Venue",
}
