from __future__ import annotations

from comps.data_models import OfferSuggestion, PriceStatistics
from comps.formatting import round_half_up


def suggest_offer(stats: PriceStatistics | None, margin_percent: float) -> int | None:
    """Median comparable price discounted by ``margin_percent``.

    No range check on the margin; callers keep it within their own limits.
    """
    if stats is None:
        return None
    return round_half_up(stats.median * (1 - margin_percent / 100))


def build_offer(stats: PriceStatistics | None, margin_percent: float) -> OfferSuggestion | None:
    suggested = suggest_offer(stats, margin_percent)
    if suggested is None:
        return None
    return OfferSuggestion(target_margin_percent=margin_percent, suggested_price=suggested)


def offer_clipboard_text(offer: OfferSuggestion | int | None) -> str | None:
    if offer is None:
        return None
    price = offer.suggested_price if isinstance(offer, OfferSuggestion) else offer
    return str(price)
