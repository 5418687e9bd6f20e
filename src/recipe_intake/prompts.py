"""Prompt templates for recipe extraction and ingredient parsing."""

from recipe_intake.domain.recipes import PromptVariant, RecipeCategory

_CATEGORIES = ", ".join(category.value for category in RecipeCategory)

_FIELDS = f"""Extract the following fields:
- title: Recipe name/title
- category: Type of dish (choose from: {_CATEGORIES})
- prep_time: Preparation time in minutes (number only, no units)
- cook_time: Cooking time in minutes (number only, no units)
- servings: Number of servings or yield (e.g., "4-6 servings")
- ingredients: {{ingredients}}
- instructions: {{instructions}}
- notes: Any tips, substitutions, or special notes
- source: Where the recipe is from (cookbook, website, person's name, etc.)
- rating: If there's a rating visible (1-5), otherwise null"""

_RESPONSE_RULES = """Return ONLY a valid JSON object with these exact field \
names. Do not include any markdown formatting, code blocks, or explanatory text. \
Just the raw JSON.

If a field cannot be determined, use null for that field."""

_SINGLE_IMAGE = """You are a recipe extraction assistant. Analyze this recipe image \
and extract all recipe information into a structured JSON format.

{fields}

{rules}"""

_MULTI_PAGE = """You are a recipe extraction assistant. These {count} images show \
different pages of the same recipe (e.g., front and back of a recipe card), in order. \
Analyze ALL images together and extract the complete recipe information into a \
single structured JSON object.

IMPORTANT: Combine information from ALL images. Don't miss any ingredients or steps \
that appear on different pages, and do not return one recipe per image.

{fields}

{rules}"""

_TEXT = """You are a recipe extraction assistant. Parse this recipe text and \
extract all information into a structured JSON format.

Recipe Text:
{document}

{fields}

{rules}"""

_INGREDIENTS = """You are a nutrition assistant. Parse these recipe ingredients and \
extract for each one:
1. quantity (as a number, convert fractions to decimals)
2. unit of measurement
3. name (standardized, without qualifiers like "chopped" or "diced")
4. search_term (simplified ingredient name for a food database lookup)

Ingredients:
{numbered}

Return ONLY a JSON array with exactly {count} objects, in the same order, with \
this structure:
[
  {{
    "original_text": "1 1/2 cups all-purpose flour, sifted",
    "quantity": 1.5,
    "unit": "cup",
    "name": "all-purpose flour",
    "search_term": "flour"
  }}
]

Rules:
- Convert fractions to decimals (1/2 -> 0.5, 1/4 -> 0.25, 1/3 -> 0.33, 2/3 -> 0.67)
- Use standard units only: cup, tbsp, tsp, oz, lb, g, ml, l
- For items counted without a unit (e.g. "2 eggs"), use ""
- Remove descriptive qualifiers ("chopped", "diced", "fresh", etc.) from the name
- For search_term, use the most basic form
  (e.g., "boneless chicken breast" -> "chicken")
- If no quantity is specified, use 0
- If no unit is specified, use ""

Output ONLY the JSON array, no markdown or explanations."""


def extraction_prompt(
    variant: PromptVariant, *, image_count: int = 1, document: str = ""
) -> str:
    """Build the extraction prompt for an instruction variant."""
    if variant is PromptVariant.TEXT:
        fields = _FIELDS.format(
            ingredients="List of ingredients, one per line (use \\n for line breaks)",
            instructions="Step-by-step cooking instructions (use \\n for line breaks)",
        )
        return _TEXT.format(document=document, fields=fields, rules=_RESPONSE_RULES)
    if variant is PromptVariant.MULTI_PAGE:
        fields = _FIELDS.format(
            ingredients="ALL ingredients from ALL images, one per line "
            "(use \\n for line breaks)",
            instructions="ALL steps from ALL images (use \\n for line breaks)",
        )
        return _MULTI_PAGE.format(
            count=image_count, fields=fields, rules=_RESPONSE_RULES
        )
    fields = _FIELDS.format(
        ingredients="List of ingredients, one per line (use \\n for line breaks)",
        instructions="Step-by-step cooking instructions (use \\n for line breaks)",
    )
    return _SINGLE_IMAGE.format(fields=fields, rules=_RESPONSE_RULES)


def ingredient_prompt(lines: list[str]) -> str:
    """Build the batch ingredient parsing prompt."""
    numbered = "\n".join(f"{index}. {line}" for index, line in enumerate(lines, 1))
    return _INGREDIENTS.format(numbered=numbered, count=len(lines))
