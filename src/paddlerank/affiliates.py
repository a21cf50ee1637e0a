"""
Affiliate retailer catalogue.

Commission rates and query parameters for each retailer we hold an
agreement with. Affiliate IDs come from settings; a retailer without an
ID is not configured and its links are not offered.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from paddlerank.config import settings
from paddlerank.db.models import AffiliateLink, RetailerKey


@dataclass(frozen=True)
class RetailerConfig:
    name: str
    base_url: str
    affiliate_param: str
    affiliate_id_setting: str  # Settings attribute holding our ID
    commission: Decimal  # 0.15 = 15%
    cookie_days: int


RETAILERS: dict[RetailerKey, RetailerConfig] = {
    RetailerKey.SELKIRK: RetailerConfig(
        name="Selkirk",
        base_url="https://www.selkirk.com",
        affiliate_param="avad",
        affiliate_id_setting="selkirk_affiliate_id",
        commission=Decimal("0.15"),
        cookie_days=30,
    ),
    RetailerKey.JUSTPADDLES: RetailerConfig(
        name="JustPaddles",
        base_url="https://www.justpaddles.com",
        affiliate_param="ref",
        affiliate_id_setting="justpaddles_affiliate_id",
        commission=Decimal("0.07"),
        cookie_days=30,
    ),
    RetailerKey.PICKLEBALLSUPERSTORE: RetailerConfig(
        name="Pickleball Superstore",
        base_url="https://www.pickleballsuperstore.com",
        affiliate_param="aff",
        affiliate_id_setting="pickleballsuperstore_id",
        commission=Decimal("0.32"),
        cookie_days=30,
    ),
    RetailerKey.AMAZON: RetailerConfig(
        name="Amazon",
        base_url="https://www.amazon.com",
        affiliate_param="tag",
        affiliate_id_setting="amazon_associate_tag",
        commission=Decimal("0.03"),
        cookie_days=1,
    ),
}


def affiliate_id(retailer: RetailerKey) -> Optional[str]:
    return getattr(settings, RETAILERS[retailer].affiliate_id_setting)


def configured_retailers() -> list[RetailerKey]:
    """Retailers with an affiliate ID set."""
    return [retailer for retailer in RETAILERS if affiliate_id(retailer)]


def best_affiliate_link(links: Sequence[AffiliateLink]) -> Optional[AffiliateLink]:
    """
    Preferred active link: highest priority, then highest commission.

    The link's own commission wins over the retailer default when set.
    """
    active = [link for link in links if link.is_active]
    if not active:
        return None

    def rank(link: AffiliateLink) -> tuple[int, Decimal]:
        commission = link.commission
        if commission is None:
            commission = RETAILERS[link.retailer].commission
        return (link.priority, commission)

    return max(active, key=rank)
