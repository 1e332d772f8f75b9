import requests
from flask import current_app

from calorie_club.utils.utils import parse_number, round_half_up

DEFAULT_SEARCH_URL = "https://world.openfoodfacts.org/cgi/search.pl"
PAGE_SIZE = 10


class FoodSearchError(Exception):
    pass


def _nutriment(nutriments: dict, key: str):
    # Upstream sometimes sends numbers as strings ("97.4", "n/a")
    value = nutriments.get(key)
    if not value:
        return None
    return round_half_up(parse_number(value, key))


def search_products(query: str):
    """
    Search Open Food Facts and return raw product dicts.
    Raises FoodSearchError when the upstream call fails.
    """
    config = current_app.config
    params = {
        "search_terms": query,
        "search_simple": 1,
        "action": "process",
        "json": 1,
        "page_size": PAGE_SIZE
    }
    headers = {
        "User-Agent": config.get("OPEN_FOOD_FACTS_USER_AGENT", "CalorieClub-CalorieTracker/1.0")
    }

    try:
        response = requests.get(
            config.get("OPEN_FOOD_FACTS_URL", DEFAULT_SEARCH_URL),
            params=params,
            headers=headers,
            timeout=config.get("OPEN_FOOD_FACTS_TIMEOUT", 5)
        )
    except requests.RequestException as e:
        raise FoodSearchError(f"Open Food Facts request failed: {e}") from e

    if response.status_code != 200:
        raise FoodSearchError(f"Open Food Facts returned {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise FoodSearchError("Open Food Facts returned invalid JSON") from e

    if not isinstance(payload, dict):
        raise FoodSearchError("Open Food Facts returned an unexpected payload")
    products = payload.get("products") or []
    return [p for p in products if isinstance(p, dict)]


def to_search_result(product: dict) -> dict:
    """
    Map one product to a search result.
    Raises ValueError when a nutriment is not a finite number.
    """
    nutriments = product.get("nutriments") or {}
    if not isinstance(nutriments, dict):
        raise ValueError("nutriments must be an object")
    return {
        "name": str(product.get("product_name") or "Unknown"),
        "calories": _nutriment(nutriments, "energy-kcal_100g") or 0,
        "protein": _nutriment(nutriments, "proteins_100g"),
        "carbs": _nutriment(nutriments, "carbohydrates_100g"),
        "fat": _nutriment(nutriments, "fat_100g"),
        "servingSize": product.get("serving_size") or "per 100g"
    }


def search_foods(query: str):
    results = []
    for product in search_products(query):
        nutriments = product.get("nutriments") or {}
        if not product.get("product_name") or not isinstance(nutriments, dict) \
                or not nutriments.get("energy-kcal_100g"):
            continue
        try:
            results.append(to_search_result(product))
        except ValueError as e:
            current_app.logger.warning("Skipping product %r: %s", product.get("product_name"), e)
        if len(results) == PAGE_SIZE:
            break
    return results
