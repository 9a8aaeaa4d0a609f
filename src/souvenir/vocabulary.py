"""Static keyword tables used to read queries and describe memories.

Everything here is immutable lookup data. Matching is done on lower-cased
text, so every keyword is lower-case.
"""

from types import MappingProxyType

# Season keywords (French and English) -> canonical season name.
SEASON_KEYWORDS = MappingProxyType({
    "printemps": "spring",
    "été": "summer",
    "automne": "autumn",
    "hiver": "winter",
    "spring": "spring",
    "summer": "summer",
    "autumn": "autumn",
    "fall": "autumn",
    "winter": "winter",
})

# Season words that are also a past participle ("j'ai été").
PARTICIPLE_SEASON_WORDS = frozenset({"été"})

# Forms of "avoir" and adverbs that may sit before such a participle.
AUXILIARY_FORMS = frozenset({
    "ai", "as", "a", "avons", "avez", "ont", "avais", "avait", "avions",
    "aviez", "avaient", "aurai", "aurais", "aurait", "aurions", "auraient",
})
AUXILIARY_ADVERBS = frozenset({
    "pas", "jamais", "déjà", "toujours", "souvent", "rarement", "bien",
    "vraiment", "aussi", "encore", "plus",
})

# Northern-hemisphere months per canonical season.
SEASON_MONTHS = MappingProxyType({
    "spring": (3, 4, 5),
    "summer": (6, 7, 8),
    "autumn": (9, 10, 11),
    "winter": (12, 1, 2),
})

# Contiguous (first_month, last_month) within one calendar year. Winter
# wraps around the new year and has no contiguous range.
SEASON_MONTH_RANGES = MappingProxyType({
    "spring": (3, 5),
    "summer": (6, 8),
    "autumn": (9, 11),
})

# Vague region names -> concrete location strings.
FUZZY_LOCATIONS = MappingProxyType({
    "le sud": ("sud de la france", "provence", "languedoc", "côte d'azur"),
    "le nord": ("nord de la france", "hauts-de-france", "normandie"),
    "l'est": ("est de la france", "alsace", "lorraine", "bourgogne"),
    "l'ouest": ("ouest de la france", "bretagne", "pays de la loire"),
    "paris": ("paris", "île-de-france"),
    "la montagne": ("alpes", "pyrénées", "massif central", "jura"),
    "la mer": ("côte atlantique", "côte méditerranéenne", "bretagne", "normandie"),
    "la campagne": ("rural", "village", "campagne"),
})

LOCATION_PREPOSITIONS = ("à", "dans", "sur")

# Words that follow a preposition or start with a capital without naming a place.
LOCATION_STOPWORDS = frozenset({
    "les", "des", "une", "mon", "ton", "son", "mes", "tes", "ses", "notre",
    "votre", "leur", "leurs", "quel", "quelle", "quels", "quelles", "cette",
    "ces", "tout", "tous", "toute", "toutes", "chez", "quoi", "qui", "que",
    "quand", "comment", "combien", "pourquoi", "moi", "toi", "lui", "elle",
    "eux", "nous", "vous", "the", "and", "what", "when", "where", "how",
    # Nouns that follow "à" or "sur" without naming a place.
    "vélo", "pied", "cheval", "moto", "noël", "pâques", "nouveau", "nouvel",
    "part", "côté", "propos", "travers", "cause", "peine", "fond", "temps",
    "midi", "minuit", "présent", "jamais", "plusieurs", "deux", "trois",
})

ACTIVITY_KEYWORDS = (
    "voyage", "vacances", "weekend", "excursion", "randonnée", "plage", "ski",
    "restaurant", "musée", "concert", "festival", "sport", "nager", "manger",
    "visiter", "découvrir", "explorer", "se promener", "faire du shopping",
)

EMOTION_KEYWORDS = (
    "joie", "bonheur", "excitation", "sérénité", "nostalgie", "tristesse",
    "colère", "peur", "surprise", "amour", "amitié", "inspiration",
)

# Query-type cues, checked in order; the first type with a matching cue wins.
QUERY_TYPE_CUES = (
    ("count", ("combien", "fois", "nombre")),
    ("narrative", ("raconte", "histoire", "moment")),
    ("summary", ("résume", "résumé", "synthèse")),
)

# Keyword -> subject phrase for count answers, checked in order.
COUNT_SUBJECTS = (
    ("restaurant", "fois où tu es allé au restaurant"),
    ("cinéma", "fois où tu es allé au cinéma"),
    ("concert", "concerts"),
    ("musée", "visites de musées"),
    ("voyage", "voyages"),
    ("bar", "fois où tu es allé au bar"),
)

THEME_KEYWORDS = MappingProxyType({
    "voyage": ("voyage", "vacances", "découverte", "exploration", "visite"),
    "gastronomie": ("restaurant", "manger", "cuisine", "plat", "dîner", "déjeuner"),
    "culture": ("musée", "exposition", "concert", "théâtre", "cinéma", "festival"),
    "sport": ("sport", "course", "vélo", "randonnée", "ski", "plage", "piscine"),
    "social": ("ami", "famille", "fête", "anniversaire", "mariage", "célébration"),
    "travail": ("travail", "bureau", "réunion", "formation", "conférence", "projet"),
})

FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)
