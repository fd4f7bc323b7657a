"""
Static reference data for the ingredient catalog.

Plain dicts keyed by id, in declaration order. Declaration order is
significant: it breaks ties when several ingredients match a line equally
well.
"""

CATEGORIES = {
    "vegetables": "Vegetables",
    "fruits": "Fruits",
    "proteins": "Proteins",
    "dairy": "Dairy",
    "grains": "Grains",
    "spices": "Spices & Herbs",
    "condiments": "Condiments",
    "oils": "Oils & Fats",
    "nuts": "Nuts & Seeds",
    "pantry": "Pantry Staples",
    "custom": "Custom",
}

# id -> (name, plural, type)
UNITS = {
    # Volume
    "cup": ("cup", "cups", "volume"),
    "tbsp": ("tbsp", "tbsp", "volume"),
    "tsp": ("tsp", "tsp", "volume"),
    "ml": ("ml", "ml", "volume"),
    "liter": ("liter", "liters", "volume"),
    # Weight
    "oz": ("oz", "oz", "weight"),
    "lb": ("lb", "lbs", "weight"),
    "gram": ("gram", "grams", "weight"),
    "kg": ("kg", "kg", "weight"),
    # Count
    "piece": ("piece", "pieces", "count"),
    "whole": ("whole", "whole", "count"),
    "clove": ("clove", "cloves", "count"),
    "sprig": ("sprig", "sprigs", "count"),
    "pinch": ("pinch", "pinches", "count"),
    "dash": ("dash", "dashes", "count"),
    "stick": ("stick", "sticks", "count"),
    "bunch": ("bunch", "bunches", "count"),
    "slice": ("slice", "slices", "count"),
    # Size
    "small": ("small", "small", "size"),
    "medium": ("medium", "medium", "size"),
    "large": ("large", "large", "size"),
    # Container
    "can": ("can", "cans", "container"),
    "package": ("package", "packages", "container"),
    "box": ("box", "boxes", "container"),
    "jar": ("jar", "jars", "container"),
}

# Hand-written spellings that resolve to a unit id
UNIT_ALIASES = {
    "cups": "cup", "c": "cup",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tbs": "tbsp", "tbsps": "tbsp", "tbl": "tbsp",
    "teaspoon": "tsp", "teaspoons": "tsp", "tsps": "tsp",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "litre": "liter", "litres": "liter",
    "ounce": "oz", "ounces": "oz",
    "pound": "lb", "pounds": "lb", "lbs": "lb",
    "g": "gram", "gr": "gram", "gramme": "gram", "grammes": "gram",
    "kilogram": "kg", "kilograms": "kg", "kgs": "kg",
    "pkg": "package", "pkgs": "package",
}

# id -> (requires_step, category)
PREPARATION_METHODS = {
    # Cutting
    "chopped": (True, "cutting"),
    "diced": (True, "cutting"),
    "sliced": (True, "cutting"),
    "minced": (True, "cutting"),
    "julienned": (True, "cutting"),
    "cubed": (True, "cutting"),
    "halved": (True, "cutting"),
    "quartered": (True, "cutting"),
    # Processing
    "grated": (True, "processing"),
    "shredded": (True, "processing"),
    "peeled": (True, "processing"),
    "crushed": (True, "processing"),
    "juiced": (True, "processing"),
    "zested": (True, "processing"),
    "cored": (True, "processing"),
    "trimmed": (True, "processing"),
    # Treatment
    "sifted": (True, "treatment"),
    "drained": (True, "treatment"),
    "rinsed": (True, "treatment"),
    # State
    "fresh": (False, "state"),
    "frozen": (False, "state"),
    "dried": (False, "state"),
    "cooked": (False, "state"),
    "skinless": (False, "state"),
    "boneless": (False, "state"),
    "divided": (False, "state"),
    "softened": (False, "state"),
    "melted": (False, "state"),
    "beaten": (False, "state"),
    "room temperature": (False, "state"),
    # Form
    "halves": (False, "form"),
    "quarters": (False, "form"),
    "pieces": (False, "form"),
    "slices": (False, "form"),
    "wedges": (False, "form"),
}

# Shape of each row: (id, name, plural, category, common_units, common_preparations, search_terms)
INGREDIENTS = [
    # Vegetables
    ("onion", "onion", "onions", "vegetables",
     ["piece", "whole", "cup", "medium", "large", "small"],
     ["chopped", "diced", "sliced", "minced", "quartered", "halved"],
     ["onion", "onions", "yellow onion", "white onion"]),
    ("garlic", "garlic", "garlic", "vegetables",
     ["clove", "tbsp", "tsp"],
     ["minced", "chopped", "crushed", "whole"],
     ["garlic", "garlic clove", "garlic cloves"]),
    ("tomato", "tomato", "tomatoes", "vegetables",
     ["piece", "cup", "can", "medium", "large"],
     ["chopped", "diced", "sliced", "quartered", "crushed"],
     ["tomato", "tomatoes", "fresh tomato", "canned tomato"]),
    ("carrot", "carrot", "carrots", "vegetables",
     ["piece", "cup", "medium", "large"],
     ["chopped", "diced", "sliced", "julienned", "grated", "peeled"],
     ["carrot", "carrots"]),
    ("potato", "potato", "potatoes", "vegetables",
     ["piece", "lb", "medium", "large", "small"],
     ["peeled", "cubed", "diced", "sliced", "quartered"],
     ["potato", "potatoes", "russet potato", "yukon gold"]),
    ("bell_pepper", "bell pepper", "bell peppers", "vegetables",
     ["piece", "cup", "medium", "large"],
     ["chopped", "diced", "sliced", "seeded"],
     ["bell pepper", "red pepper", "green pepper", "capsicum"]),
    ("celery", "celery", "celery", "vegetables",
     ["piece", "cup", "stick"],
     ["chopped", "diced", "sliced", "trimmed"],
     ["celery", "celery stalk", "celery stalks", "celery rib"]),
    ("avocado", "avocado", "avocados", "vegetables",
     ["piece", "medium", "large"],
     ["halved", "pitted", "sliced", "mashed"],
     ["avocado", "avocados"]),
    # Proteins
    ("chicken", "chicken", "chickens", "proteins",
     ["piece", "lb", "oz", "whole"],
     ["whole", "cut up", "quartered"],
     ["chicken", "whole chicken", "chicken pieces"]),
    ("chicken_breast", "chicken breast", "chicken breasts", "proteins",
     ["piece", "lb", "oz"],
     ["cubed", "sliced", "whole", "skinless", "boneless", "halves"],
     ["chicken breast", "chicken breasts", "chicken", "breast"]),
    ("ground_beef", "ground beef", "ground beef", "proteins",
     ["lb", "oz"],
     ["cooked", "fresh"],
     ["ground beef", "beef", "hamburger"]),
    ("egg", "egg", "eggs", "proteins",
     ["piece", "large", "medium", "small"],
     ["beaten", "room temperature", "separated"],
     ["egg", "eggs", "egg yolk", "egg white"]),
    # Dairy
    ("milk", "milk", "milk", "dairy",
     ["cup", "tbsp", "ml"],
     ["whole", "skim", "2%"],
     ["milk", "whole milk", "skim milk"]),
    ("butter", "butter", "butter", "dairy",
     ["tbsp", "cup", "oz", "stick"],
     ["softened", "melted", "cold"],
     ["butter", "unsalted butter", "salted butter"]),
    ("cheddar", "cheddar cheese", "cheddar cheese", "dairy",
     ["cup", "oz"],
     ["shredded", "grated", "sliced"],
     ["cheddar", "cheddar cheese", "cheese"]),
    # Grains
    ("flour", "flour", "flour", "grains",
     ["cup", "tbsp", "oz"],
     ["sifted", "all-purpose", "whole wheat"],
     ["flour", "all-purpose flour", "wheat flour"]),
    ("rice", "rice", "rice", "grains",
     ["cup", "oz"],
     ["rinsed", "cooked", "uncooked"],
     ["rice", "white rice", "brown rice", "jasmine rice"]),
    # Spices
    ("salt", "salt", "salt", "spices",
     ["tsp", "tbsp", "pinch"],
     ["kosher", "sea salt", "table salt"],
     ["salt", "kosher salt", "sea salt", "table salt"]),
    ("black_pepper", "black pepper", "black pepper", "spices",
     ["tsp", "tbsp", "pinch"],
     ["ground", "freshly ground", "whole"],
     ["black pepper", "pepper", "ground pepper"]),
    ("parsley", "parsley", "parsley", "spices",
     ["sprig", "tbsp", "tsp", "cup", "bunch"],
     ["fresh", "dried", "chopped", "minced"],
     ["parsley", "fresh parsley", "dried parsley", "italian parsley", "flat leaf parsley"]),
    ("oregano", "oregano", "oregano", "spices",
     ["tsp", "tbsp", "pinch"],
     ["fresh", "dried", "crushed"],
     ["oregano", "fresh oregano", "dried oregano", "italian oregano"]),
    ("cinnamon", "cinnamon", "cinnamon", "spices",
     ["tsp", "tbsp", "stick", "pinch"],
     ["ground"],
     ["cinnamon", "ground cinnamon", "cinnamon stick"]),
    # Oils
    ("olive_oil", "olive oil", "olive oil", "oils",
     ["tbsp", "tsp", "cup"],
     ["extra virgin", "virgin", "light"],
     ["olive oil", "extra virgin olive oil", "evoo"]),
    ("vegetable_oil", "vegetable oil", "vegetable oil", "oils",
     ["tbsp", "tsp", "cup"],
     [],
     ["vegetable oil", "canola oil", "oil"]),
    # Fruits
    ("lemon", "lemon", "lemons", "fruits",
     ["piece", "whole", "tbsp", "tsp", "medium", "large"],
     ["juiced", "zested", "sliced", "wedges", "halved"],
     ["lemon", "lemons", "lemon juice", "fresh lemon"]),
    ("apple", "apple", "apples", "fruits",
     ["piece", "cup", "medium", "large", "small"],
     ["peeled", "cored", "sliced", "halved", "quartered", "halves"],
     ["apple", "apples", "granny smith", "green apple"]),
    # Listed a second time under fruits; the catalog keeps this later definition
    ("avocado", "avocado", "avocados", "fruits",
     ["piece", "medium", "large"],
     ["halved", "pitted", "sliced", "mashed"],
     ["avocado", "avocados", "hass avocado"]),
    # Pantry
    ("sugar", "sugar", "sugar", "pantry",
     ["cup", "tbsp", "tsp"],
     ["granulated", "brown", "powdered"],
     ["sugar", "granulated sugar", "white sugar"]),
    ("brown_sugar", "brown sugar", "brown sugar", "pantry",
     ["cup", "tbsp", "tsp"],
     ["packed", "light", "dark"],
     ["brown sugar", "light brown sugar", "dark brown sugar"]),
    ("vanilla_extract", "vanilla extract", "vanilla extract", "pantry",
     ["tsp", "tbsp"],
     ["pure", "imitation"],
     ["vanilla extract", "vanilla", "pure vanilla"]),
    ("baking_soda", "baking soda", "baking soda", "pantry",
     ["tsp", "tbsp", "pinch"],
     [],
     ["baking soda", "bicarbonate of soda"]),
    ("baking_powder", "baking powder", "baking powder", "pantry",
     ["tsp", "tbsp"],
     [],
     ["baking powder"]),
    ("water", "water", "water", "pantry",
     ["cup", "ml", "liter", "tbsp"],
     ["cold", "warm", "boiling"],
     ["water"]),
    ("chicken_broth", "chicken broth", "chicken broth", "pantry",
     ["cup", "ml", "can", "liter"],
     ["low sodium"],
     ["chicken broth", "chicken stock", "broth", "stock"]),
    # Nuts
    ("walnuts", "walnuts", "walnuts", "nuts",
     ["cup", "oz"],
     ["chopped", "toasted", "halves"],
     ["walnut", "walnuts", "walnut halves"]),
]

# Ratio tables for conversion suggestions: from unit -> {to unit: factor}
UNIT_CONVERSIONS = {
    "volume": {
        "tsp": {"tbsp": 1 / 3, "cup": 1 / 48, "ml": 4.93},
        "tbsp": {"tsp": 3, "cup": 1 / 16, "ml": 14.79},
        "cup": {"tbsp": 16, "tsp": 48, "ml": 236.6},
        "ml": {"tsp": 0.203, "tbsp": 0.0676, "cup": 0.00423},
    },
    "weight": {
        "oz": {"lb": 0.0625, "gram": 28.35},
        "lb": {"oz": 16, "kg": 0.453},
        "gram": {"oz": 0.035, "kg": 0.001},
        "kg": {"gram": 1000, "lb": 2.205},
    },
}
