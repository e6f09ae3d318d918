from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..api_client import ApiClient, parse_item, parse_list
from ..schemas import Auction, AuctionStats, AutoBidSettings, Bid, Page


def _amount(value: Decimal | float | int) -> float:
    # The auction endpoints take major units as JSON numbers.
    return float(value)


class AuctionService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_auctions(
        self, page: Optional[int] = None, limit: Optional[int] = None, status: Optional[str] = None
    ) -> Page[Auction]:
        data = self.client.get("/auctions", params={"page": page, "limit": limit, "status": status})
        items, total = parse_list(Auction, data, "auctions")
        return Page[Auction](items=items, total=total)

    def get_live_auctions(self) -> List[Auction]:
        return parse_list(Auction, self.client.get("/auctions/live"), "auctions")[0]

    def get_auction(self, auction_id: str) -> Auction:
        return parse_item(Auction, self.client.get(f"/auctions/{auction_id}"), "auction")

    def get_auction_bids(self, auction_id: str, limit: Optional[int] = None) -> Page[Bid]:
        data = self.client.get(f"/auctions/{auction_id}/bids", params={"limit": limit})
        items, total = parse_list(Bid, data, "bids")
        return Page[Bid](items=items, total=total)

    def get_auction_stats(self, auction_id: str) -> AuctionStats:
        return parse_item(AuctionStats, self.client.get(f"/auctions/{auction_id}/stats"), "stats")

    def create_auction(
        self,
        product_id: str,
        starting_price: Decimal,
        start_time: datetime,
        end_time: datetime,
        reserve_price: Optional[Decimal] = None,
        buy_now_price: Optional[Decimal] = None,
    ) -> Auction:
        if end_time <= start_time:
            raise ValueError("Auction must end after it starts")
        payload: Dict[str, Any] = {
            "product_id": product_id,
            "starting_price": _amount(starting_price),
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
        }
        if reserve_price is not None:
            payload["reserve_price"] = _amount(reserve_price)
        if buy_now_price is not None:
            payload["buy_now_price"] = _amount(buy_now_price)
        return parse_item(Auction, self.client.post("/auctions", payload), "auction")

    def place_bid(self, auction_id: str, amount: Decimal) -> Bid:
        data = self.client.post(f"/auctions/{auction_id}/bid", {"amount": _amount(amount)})
        return parse_item(Bid, data, "bid")

    def set_auto_bid(self, auction_id: str, auto_bid: AutoBidSettings) -> Dict[str, Any]:
        payload = {"enabled": auto_bid.enabled, "max_amount": _amount(auto_bid.max_amount)}
        return self.client.post(f"/auctions/{auction_id}/autobid", payload) or {}

    def join_auction(self, auction_id: str) -> Dict[str, Any]:
        return self.client.post(f"/auctions/{auction_id}/join") or {}

    def leave_auction(self, auction_id: str) -> Dict[str, Any]:
        return self.client.post(f"/auctions/{auction_id}/leave") or {}

    def start_auction(self, auction_id: str) -> Auction:
        return parse_item(Auction, self.client.put(f"/auctions/{auction_id}/start"), "auction")

    def end_auction(self, auction_id: str) -> Auction:
        return parse_item(Auction, self.client.put(f"/auctions/{auction_id}/end"), "auction")
