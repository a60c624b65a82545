"""Static seed data for the food catalog and dietary profiles."""

from nutrilens.domain.foods import FoodItem, NutritionalInfo
from nutrilens.domain.profiles import DietaryProfile

GUEST_PROFILE_ID = "guest"

FOOD_DATABASE: tuple[FoodItem, ...] = (
    FoodItem(
        id="apple",
        name="Apple",
        ingredients="apple",
        nutrition=NutritionalInfo(calories=52, protein=0.3, carbs=14, fat=0.2),
    ),
    FoodItem(
        id="banana",
        name="Banana",
        ingredients="banana",
        nutrition=NutritionalInfo(calories=89, protein=1.1, carbs=23, fat=0.3),
    ),
    FoodItem(
        id="chicken_breast",
        name="Chicken Breast (100g)",
        ingredients="chicken",
        nutrition=NutritionalInfo(calories=165, protein=31, carbs=0, fat=3.6),
    ),
    FoodItem(
        id="brown_rice",
        name="Brown Rice (cooked, 1 cup)",
        ingredients="brown rice",
        nutrition=NutritionalInfo(calories=215, protein=5, carbs=45, fat=1.8),
    ),
    FoodItem(
        id="whole_egg",
        name="Whole Egg",
        ingredients="egg",
        nutrition=NutritionalInfo(calories=78, protein=6, carbs=0.6, fat=5),
    ),
    FoodItem(
        id="peanut_butter",
        name="Peanut Butter (2 tbsp)",
        ingredients="peanuts, sugar, salt",
        nutrition=NutritionalInfo(calories=190, protein=7, carbs=8, fat=16),
    ),
    FoodItem(
        id="whole_wheat_bread",
        name="Whole Wheat Bread (1 slice)",
        ingredients="whole wheat flour, water, yeast, salt",
        nutrition=NutritionalInfo(calories=81, protein=4, carbs=14, fat=1.1),
    ),
    FoodItem(
        id="milk",
        name="Milk (1 cup)",
        ingredients="milk",
        nutrition=NutritionalInfo(calories=103, protein=8, carbs=12, fat=2.4),
    ),
)

DEFAULT_PROFILES: tuple[DietaryProfile, ...] = (
    DietaryProfile(
        id=GUEST_PROFILE_ID,
        name="Guest (No restrictions)",
        dietary_needs="None",
        allergies="None",
        preferences="None",
    ),
    DietaryProfile(
        id="vegan",
        name="Vegan",
        dietary_needs="Vegan, no animal products.",
        allergies="None",
        preferences="Prefers plant-based whole foods.",
    ),
    DietaryProfile(
        id="gluten_free",
        name="Gluten-Free",
        dietary_needs="Must not contain gluten.",
        allergies="wheat, barley, rye",
        preferences="Avoids processed foods that may contain hidden gluten.",
    ),
)

DEFAULT_PROFILE_IDS = frozenset(profile.id for profile in DEFAULT_PROFILES)
