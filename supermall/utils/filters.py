"""
Filtering, sorting, fuzzy search and pagination for listings

Shops, products and offers are fetched in full and narrowed in memory, so
every helper here is a pure function over a list. Sort helpers return new
lists and never reorder their input.

Fuzzy search scores each key with difflib: 0 is a perfect (substring) hit,
1 is no resemblance. Items whose best key score is within the threshold are
kept, best first.
"""
import math
from dataclasses import dataclass, field
from datetime import date
from difflib import SequenceMatcher
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_THRESHOLD = 0.3
EARTH_RADIUS_KM = 6371

PRODUCT_SEARCH_KEYS = ["name", "description", "brand", "sku"]
SHOP_SEARCH_KEYS = ["name", "category_name", "location_name"]

PRODUCT_SORT_ORDERS = ("relevance", "priceAsc", "priceDesc", "rating")
SHOP_SORT_ORDERS = ("rating", "distance")
OFFER_SORT_ORDERS = ("expiryAsc", "discountDesc", "newest")


# ============================================================================
# Filter options
# ============================================================================

class ShopFilters(BaseModel):
    categories: List[str] = Field(default_factory=list, description="Any of these category IDs")
    location: Optional[str] = Field(None, description="Exact location label")
    open_now: bool = False
    has_offers: bool = False
    min_rating: float = Field(0, ge=0, le=5)


class ProductFilters(BaseModel):
    category: Optional[str] = Field(None, description="Category ID")
    min_price: float = Field(0, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    in_stock_only: bool = False
    rating_min: float = Field(0, ge=0, le=5)
    brand: Optional[str] = None
    discount_only: bool = False


class OfferFilters(BaseModel):
    category: Optional[str] = Field(None, description="Category ID")
    shop_id: Optional[str] = None
    valid_only: bool = True
    min_discount: float = Field(0, ge=0)


@dataclass
class Page(Generic[T]):
    """One page of a filtered listing"""

    items: List[T]
    page: int
    page_size: int
    total: int
    end_reached: bool = field(default=False)


# ============================================================================
# Fuzzy search
# ============================================================================

def get_value(item: Any, key: str) -> Any:
    """Resolve a possibly dotted key on a dict or an object"""
    value = item
    for part in key.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def match_score(term: str, value: Any) -> float:
    """
    Score how well ``term`` matches ``value`` (0 best, 1 worst)

    A case-insensitive substring hit scores 0. Otherwise the best difflib
    ratio over every window of the value as long as the term is used, which
    keeps long descriptions from drowning a good partial match.
    """
    if value is None:
        return 1.0
    needle = term.strip().lower()
    haystack = str(value).lower()
    if not needle or not haystack:
        return 1.0
    if needle in haystack:
        return 0.0

    width = len(needle)
    if len(haystack) <= width:
        candidates = [haystack]
    else:
        candidates = [haystack[i:i + width] for i in range(len(haystack) - width + 1)]

    best = max(SequenceMatcher(None, needle, candidate).ratio() for candidate in candidates)
    return 1.0 - best


def fuzzy_search(
    items: Sequence[T],
    term: Optional[str],
    keys: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[T]:
    """Items matching ``term`` on any key, best match first (stable on ties)"""
    if not term or not term.strip():
        return list(items)

    keys = list(keys)
    scored = []
    for index, item in enumerate(items):
        score = min((match_score(term, get_value(item, key)) for key in keys), default=1.0)
        if score <= threshold:
            scored.append((score, index, item))

    scored.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _, _, item in scored]


def substring_search(items: Sequence[T], term: Optional[str], keys: Iterable[str]) -> List[T]:
    """Case-insensitive substring match on any key"""
    if not term:
        return list(items)
    needle = term.lower()
    keys = list(keys)
    return [
        item for item in items
        if any(needle in str(get_value(item, key) or "").lower() for key in keys)
    ]


# ============================================================================
# Shops
# ============================================================================

def filter_shops(shops: Sequence[T], filters: ShopFilters) -> List[T]:
    results = list(shops)

    if filters.categories:
        results = filter_by_multiple_categories(results, filters.categories)
    if filters.location:
        results = [s for s in results if get_value(s, "location_name") == filters.location]
    if filters.open_now:
        results = [s for s in results if get_value(s, "is_open") is True]
    if filters.has_offers:
        results = [s for s in results if (get_value(s, "offer_count") or 0) > 0]
    if filters.min_rating:
        results = [s for s in results if (get_value(s, "rating") or 0) >= filters.min_rating]

    return results


def filter_by_multiple_categories(items: Sequence[T], categories: Iterable[str]) -> List[T]:
    wanted = set(categories)
    return [item for item in items if get_value(item, "category_id") in wanted]


def search_shops(shops: Sequence[T], term: Optional[str], threshold: float = DEFAULT_THRESHOLD) -> List[T]:
    return fuzzy_search(shops, term, SHOP_SEARCH_KEYS, threshold)


def sort_shops_by_rating(shops: Sequence[T]) -> List[T]:
    return sorted(shops, key=lambda s: get_value(s, "rating") or 0, reverse=True)


def calculate_distance(loc_a: Optional[dict], loc_b: Optional[dict]) -> float:
    """Haversine distance in km, infinity when either point is unknown"""
    if not loc_a or not loc_b:
        return math.inf
    if None in (loc_a.get("lat"), loc_a.get("lng"), loc_b.get("lat"), loc_b.get("lng")):
        return math.inf

    d_lat = math.radians(loc_b["lat"] - loc_a["lat"])
    d_lng = math.radians(loc_b["lng"] - loc_a["lng"])
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(loc_a["lat"])) * math.cos(math.radians(loc_b["lat"])) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def shop_coords(shop: Any) -> Optional[dict]:
    lat, lng = get_value(shop, "lat"), get_value(shop, "lng")
    if lat is None or lng is None:
        return None
    return {"lat": lat, "lng": lng}


def sort_shops_by_distance(shops: Sequence[T], user_location: Optional[dict]) -> List[T]:
    """Nearest first, shops without coordinates last"""
    return sorted(shops, key=lambda s: calculate_distance(user_location, shop_coords(s)))


# ============================================================================
# Offers
# ============================================================================

def filter_offers(offers: Sequence[T], filters: OfferFilters, today: Optional[date] = None) -> List[T]:
    filtered = list(offers)

    if filters.category:
        filtered = [o for o in filtered if get_value(o, "category_id") == filters.category]
    if filters.shop_id:
        filtered = [o for o in filtered if get_value(o, "shop_id") == filters.shop_id]
    if filters.valid_only:
        today = today or date.today()
        filtered = [
            o for o in filtered
            if get_value(o, "end_date") is None or get_value(o, "end_date") >= today
        ]
    if filters.min_discount:
        filtered = [o for o in filtered if (get_value(o, "discount") or 0) >= filters.min_discount]

    return filtered


def search_offers(offers: Sequence[T], term: Optional[str]) -> List[T]:
    return substring_search(offers, term, ["title", "description"])


def sort_offers(offers: Sequence[T], order: str) -> List[T]:
    """expiryAsc (no expiry last), discountDesc, newest (undated last)"""
    if order == "expiryAsc":
        return sorted(
            offers,
            key=lambda o: (get_value(o, "end_date") is None, get_value(o, "end_date") or date.max),
        )
    if order == "discountDesc":
        return sorted(offers, key=lambda o: get_value(o, "discount") or 0, reverse=True)
    if order == "newest":
        dated = [o for o in offers if get_value(o, "created_at") is not None]
        undated = [o for o in offers if get_value(o, "created_at") is None]
        return sorted(dated, key=lambda o: get_value(o, "created_at"), reverse=True) + undated
    return list(offers)


# ============================================================================
# Products
# ============================================================================

def filter_products(products: Sequence[T], filters: ProductFilters) -> List[T]:
    results = list(products)

    if filters.category:
        results = [p for p in results if get_value(p, "category_id") == filters.category]
    if filters.min_price:
        results = [p for p in results if float(get_value(p, "price") or 0) >= filters.min_price]
    if filters.max_price is not None:
        results = [p for p in results if float(get_value(p, "price") or 0) <= filters.max_price]
    if filters.in_stock_only:
        results = [p for p in results if (get_value(p, "stock") or 0) > 0]
    if filters.rating_min:
        results = [p for p in results if (get_value(p, "avg_rating") or 0) >= filters.rating_min]
    if filters.brand:
        brand = filters.brand.lower()
        results = [p for p in results if (get_value(p, "brand") or "").lower() == brand]
    if filters.discount_only:
        results = [p for p in results if (get_value(p, "discount") or 0) > 0]

    return results


def sort_products_by_rating(products: Sequence[T]) -> List[T]:
    return sorted(products, key=lambda p: get_value(p, "avg_rating") or 0, reverse=True)


def sort_products_by_price(products: Sequence[T], ascending: bool = True) -> List[T]:
    return sorted(products, key=lambda p: get_value(p, "price") or 0, reverse=not ascending)


def sort_products(products: Sequence[T], order: str) -> List[T]:
    sorters: dict = {
        "priceAsc": lambda items: sort_products_by_price(items, True),
        "priceDesc": lambda items: sort_products_by_price(items, False),
        "rating": sort_products_by_rating,
    }
    sorter: Optional[Callable[[Sequence[T]], List[T]]] = sorters.get(order)
    # relevance keeps search order
    return sorter(products) if sorter else list(products)


def search_products(products: Sequence[T], term: Optional[str], threshold: float = DEFAULT_THRESHOLD) -> List[T]:
    return fuzzy_search(products, term, PRODUCT_SEARCH_KEYS, threshold)


# ============================================================================
# Pagination
# ============================================================================

def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice page ``page`` (1-based) of ``page_size`` items"""
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    total = len(items)
    start = (page - 1) * page_size
    end = start + page_size
    return Page(
        items=list(items[start:end]),
        page=page,
        page_size=page_size,
        total=total,
        end_reached=end >= total,
    )
