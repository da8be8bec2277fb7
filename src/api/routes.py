"""API routes for quotes, analysis and the watchlist."""

import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from src.api.dependencies import get_metrics_calculator, get_quote_service, get_watchlist_store
from src.models.market_data import AnalysisSummary, PricePoint, QuoteResult
from src.models.watchlist import Watchlist
from src.services.analysis_engine import analyze
from src.services.quote_service import QuoteService
from src.services.watchlist_service import WatchlistStore
from src.utils.metrics import QuoteMetricsCalculator
from src.utils.trace_context import trace_scope

router = APIRouter()


class PricePointModel(BaseModel):
    """One closing price."""
    date: datetime.date
    price: float = Field(gt=0)


class AnalysisResponse(BaseModel):
    """Summary statistics; volatility and total_return are percentages."""
    max: float
    min: float
    average: float
    volatility: float
    total_return: float


class QuoteResponse(BaseModel):
    """Quote with its price history and analysis."""
    symbol: str
    company_name: str
    prices: list[PricePointModel]
    current_price: float
    previous_price: float
    price_change: float
    price_change_percent: float
    is_fallback: bool
    analysis: AnalysisResponse


class AnalyzeRequest(BaseModel):
    """Request model for analyzing a caller-supplied series."""
    prices: list[PricePointModel]


class WatchlistAddRequest(BaseModel):
    symbol: str = Field(min_length=1)
    company_name: str


class PriceUpdateRequest(BaseModel):
    price: float
    change: float


class WatchlistItemResponse(BaseModel):
    symbol: str
    company_name: str
    added_at: datetime.datetime
    last_price: float | None = None
    price_change: float | None = None


class WatchlistResponse(BaseModel):
    items: list[WatchlistItemResponse]
    last_updated: datetime.datetime


class WatchlistMembershipResponse(BaseModel):
    symbol: str
    in_watchlist: bool


def _analysis_response(summary: AnalysisSummary) -> AnalysisResponse:
    return AnalysisResponse(
        max=summary.max,
        min=summary.min,
        average=summary.average,
        volatility=summary.volatility,
        total_return=summary.total_return,
    )


def _quote_response(quote: QuoteResult) -> QuoteResponse:
    return QuoteResponse(
        symbol=quote.symbol,
        company_name=quote.company_name,
        prices=[PricePointModel(date=p.date, price=p.price) for p in quote.prices],
        current_price=quote.current_price,
        previous_price=quote.previous_price,
        price_change=quote.price_change,
        price_change_percent=quote.price_change_percent,
        is_fallback=quote.is_fallback,
        analysis=_analysis_response(analyze(quote.prices)),
    )


def _watchlist_response(watchlist: Watchlist) -> WatchlistResponse:
    return WatchlistResponse(
        items=[
            WatchlistItemResponse(
                symbol=item.symbol,
                company_name=item.company_name,
                added_at=item.added_at,
                last_price=item.last_price,
                price_change=item.price_change,
            )
            for item in watchlist.items
        ],
        last_updated=watchlist.last_updated,
    )


@router.get("/quote/{symbol}", response_model=QuoteResponse)
async def get_quote(
    symbol: str,
    period: str = Query("1mo", description="One of 1mo, 3mo, 6mo, 1y, 2y"),
    quote_service: QuoteService = Depends(get_quote_service),
):
    """
    Fetch a quote and its analysis.

    Falls back to generated data when the quote source fails; the
    is_fallback flag tells the caller which one was served.
    """
    with trace_scope():
        quote = await quote_service.fetch_quote(symbol, period)
    return _quote_response(quote)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_prices(request: AnalyzeRequest):
    """Summarize a caller-supplied series. An empty series is rejected with 400."""
    series = [PricePoint(date=p.date, price=p.price) for p in request.prices]
    return _analysis_response(analyze(series))


@router.get("/watchlist", response_model=WatchlistResponse)
def get_watchlist(store: WatchlistStore = Depends(get_watchlist_store)):
    return _watchlist_response(store.load())


@router.post("/watchlist", response_model=WatchlistResponse)
def add_to_watchlist(
    request: WatchlistAddRequest,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    return _watchlist_response(store.add(request.symbol, request.company_name))


@router.post("/watchlist/refresh", response_model=WatchlistResponse)
async def refresh_watchlist(
    period: str = Query("1mo"),
    store: WatchlistStore = Depends(get_watchlist_store),
    quote_service: QuoteService = Depends(get_quote_service),
):
    """Refresh last price and change of every watched symbol."""
    with trace_scope():
        watchlist = await store.refresh_prices(quote_service, period)
    return _watchlist_response(watchlist)


@router.get("/watchlist/{symbol}", response_model=WatchlistMembershipResponse)
def watchlist_contains(symbol: str, store: WatchlistStore = Depends(get_watchlist_store)):
    return WatchlistMembershipResponse(symbol=symbol.upper(), in_watchlist=store.contains(symbol))


@router.delete("/watchlist/{symbol}", response_model=WatchlistResponse)
def remove_from_watchlist(symbol: str, store: WatchlistStore = Depends(get_watchlist_store)):
    return _watchlist_response(store.remove(symbol))


@router.put("/watchlist/{symbol}/price", response_model=WatchlistResponse)
def update_watchlist_price(
    symbol: str,
    request: PriceUpdateRequest,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    store.update_price(symbol, request.price, request.change)
    return _watchlist_response(store.load())


@router.get("/metrics")
async def get_metrics(calculator: QuoteMetricsCalculator = Depends(get_metrics_calculator)):
    """Quote fetch counters, including how often fallback data was served."""
    return calculator.calculate().to_dict()
