"""
Chatbot Service for SuperMall

Scripted shopping assistant. Each message is classified into an intent with
keyword rules, then answered from the catalog and the caller's orders:

- product_recommendation: products from the caller's wishlist categories,
  falling back to the top rated in-stock products
- order_tracking: status of the order id in the message, or of the last
  order discussed in this session
- cart_management, human_agent, greeting: canned replies
- fallback: anything else

The per-session context (last_order_id, last_intent) is persisted in
chat_sessions so a conversation can continue across requests.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from supermall.core.logging_config import log_action
from supermall.domain.product import Product
from supermall.repositories.order_repository import OrderRepository
from supermall.repositories.product_repository import ProductRepository
from supermall.repositories.session_repository import ChatSessionRepository
from supermall.repositories.wishlist_repository import WishlistRepository

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

MAX_RECOMMENDATIONS = 4

INTENT_KEYWORDS = [
    ("human_agent", ["human", "agent", "representative", "real person", "talk to someone"]),
    ("order_tracking", ["track", "order status", "where is my order", "delivery", "shipped", "my order"]),
    ("cart_management", ["cart", "basket", "checkout"]),
    ("product_recommendation", ["recommend", "suggest", "looking for", "show me", "gift", "best", "buy"]),
    ("greeting", ["hi", "hello", "hey", "good morning", "good evening"]),
]

ORDER_ID_RE = re.compile(
    r"(?:order\s*(?:id|number|no\.?)?\s*[:#]?\s*|#)([A-Za-z0-9-]*\d[A-Za-z0-9-]*)",
    re.IGNORECASE,
)

REPLIES = {
    "ask_order_id": "Please provide your order ID to track your order.",
    "login_for_orders": "Please log in so I can look up your orders.",
    "cart_management": "I can help you add or remove items from your cart. What would you like to do?",
    "human_agent": "Connecting you to a human agent...",
    "greeting": "Hello! I'm the SuperMall assistant. Ask me for product ideas or about your orders.",
    "recommendations": "Here are some products you might like:",
    "no_recommendations": "I couldn't find any recommendations right now.",
    "fallback": "I'm here to help with your shopping queries and more!",
}


@dataclass
class ChatReply:
    """What the assistant answers to one message"""

    session_id: str
    intent: str
    text: str
    cards: List[Dict[str, Any]] = field(default_factory=list)
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "intent": self.intent,
            "text": self.text,
            "cards": self.cards,
        }


def _contains_keyword(message: str, keyword: str) -> bool:
    """Whole-word match for single words, substring match for phrases"""
    if " " in keyword:
        return keyword in message
    return re.search(rf"\b{re.escape(keyword)}\b", message) is not None


def classify_intent(message: str) -> str:
    """First intent whose keywords appear in the message, else fallback"""
    text = (message or "").lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(_contains_keyword(text, keyword) for keyword in keywords):
            return intent
    return "fallback"


def extract_order_id(message: str) -> Optional[str]:
    match = ORDER_ID_RE.search(message or "")
    return match.group(1) if match else None


def product_card(product: Product) -> Dict[str, Any]:
    return {
        "type": "product_card",
        "id": product.id,
        "title": product.name,
        "price": float(product.sale_price),
        "image_url": product.image_url,
    }


class ChatbotService:
    """Scripted assistant backed by the catalog and order repositories"""

    def __init__(
        self,
        session_repo: Optional[ChatSessionRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        wishlist_repo: Optional[WishlistRepository] = None,
    ):
        self.session_repo = session_repo or ChatSessionRepository()
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()
        self.wishlist_repo = wishlist_repo or WishlistRepository()

    def handle_message(self, session_id: str, message: str, user_id: Optional[str] = None) -> ChatReply:
        """
        Answer one message and persist the updated session context

        Args:
            session_id: Client generated conversation id
            message: User text
            user_id: Authenticated caller, if any
        """
        context = self.session_repo.get_context(session_id)
        intent = classify_intent(message)

        if intent == "product_recommendation":
            reply = self._recommend(session_id, user_id)
        elif intent == "order_tracking":
            reply = self._track_order(session_id, message, user_id, context)
        else:
            reply = ChatReply(session_id=session_id, intent=intent, text=REPLIES[intent])

        context.update(reply.context)
        context["last_intent"] = intent
        self.session_repo.save_context(session_id, user_id, context)

        log_action("Chat message processed", session_id=session_id, user_id=user_id, intent=intent)
        return reply

    def recommend_products(self, user_id: Optional[str]) -> List[Product]:
        """Top rated in-stock products of the caller's wishlist categories"""
        if user_id:
            wishlisted = self.product_repo.find_by_ids(self.wishlist_repo.find_product_ids(user_id))
            category_ids = sorted({p.category_id for p in wishlisted if p.category_id})
            if category_ids:
                wishlisted_ids = {p.id for p in wishlisted}
                products = [
                    p for p in self.product_repo.find_by_categories(category_ids, MAX_RECOMMENDATIONS * 2)
                    if p.id not in wishlisted_ids
                ]
                if products:
                    return products[:MAX_RECOMMENDATIONS]
        return self.product_repo.find_top_rated(MAX_RECOMMENDATIONS)

    def _recommend(self, session_id: str, user_id: Optional[str]) -> ChatReply:
        products = self.recommend_products(user_id)
        if not products:
            return ChatReply(session_id, "product_recommendation", REPLIES["no_recommendations"])
        return ChatReply(
            session_id,
            "product_recommendation",
            REPLIES["recommendations"],
            cards=[product_card(p) for p in products],
        )

    def _track_order(
        self,
        session_id: str,
        message: str,
        user_id: Optional[str],
        context: Dict[str, Any],
    ) -> ChatReply:
        order_id = extract_order_id(message) or context.get("last_order_id")
        if not order_id:
            return ChatReply(session_id, "order_tracking", REPLIES["ask_order_id"])
        if not user_id:
            return ChatReply(session_id, "order_tracking", REPLIES["login_for_orders"])

        order = self.order_repo.find_by_id(order_id)
        if not order or order.user_id != user_id:
            logger.info(f"Chat order lookup failed for {order_id}")
            return ChatReply(session_id, "order_tracking", f"I couldn't find order #{order_id}.")

        return ChatReply(
            session_id,
            "order_tracking",
            f"Your order #{order.id} is currently: {order.status.value}.",
            context={"last_order_id": order.id},
        )
