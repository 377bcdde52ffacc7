"""
Venue adapter registry.

Every source lives here in a fixed order. To add a venue, write (or reuse)
an adapter class and add an entry to build_adapters().
"""

from typing import Dict, List, Optional

from ..config import PipelineConfig
from ..fetching import Fetcher
from .base import Adapter, ListingDetailAdapter, SingleDocumentAdapter
from .diamond_ballroom import DiamondBallroomAdapter
from .prekindle import PrekindleAdapter, PrekindleTimedAdapter, PrekindleWidgetAdapter
from .squarespace import SquarespaceAdapter
from .vanguard import VanguardAdapter
from .wix import EightyNinthStreetAdapter

__all__ = [
    "Adapter",
    "ListingDetailAdapter",
    "SingleDocumentAdapter",
    "build_adapters",
    "get_adapter",
    "adapter_names",
]


def build_adapters(config: PipelineConfig, fetcher: Optional[Fetcher] = None) -> List[Adapter]:
    """Instantiate every registered adapter, sharing one fetcher."""
    fetcher = fetcher or Fetcher(config)
    return [
        EightyNinthStreetAdapter(config, fetcher),
        SquarespaceAdapter(
            config, fetcher,
            name="opolis",
            base_url="https://www.opolis.org",
            events_path="/opolisevents",
            venue_name="Opolis",
        ),
        PrekindleAdapter(
            config, fetcher,
            name="towertheater",
            url="https://www.prekindle.com/events/tower-theatre",
            venue_name="Tower Theatre",
            venue_url="https://www.towertheatreokc.com",
        ),
        DiamondBallroomAdapter(config, fetcher),
        PrekindleAdapter(
            config, fetcher,
            name="whittierbar",
            url="https://www.prekindle.com/events/the-whittier-bar",
            venue_name="The Whittier Bar",
            venue_url="https://www.thewhittierbar.com",
        ),
        SquarespaceAdapter(
            config, fetcher,
            name="noisetown",
            base_url="https://www.noisetowntulsa.com",
            events_path="/events",
            venue_name="Noise Town",
            read_excerpt=True,
        ),
        VanguardAdapter(config, fetcher),
        PrekindleWidgetAdapter(
            config, fetcher,
            name="mercurylounge",
            url=(
                "https://www.prekindle.com/organizer-grid-widget-main/id/24898849004906244/"
                "?fp=false&thumbs=true&style=null"
            ),
            venue_name="Mercury Lounge",
            venue_url="https://www.mercuryloungetulsa.com",
        ),
        PrekindleTimedAdapter(
            config, fetcher,
            name="beercity",
            url="https://www.prekindle.com/events/beer-city-music-hall",
            venue_name="Beer City Music Hall",
            venue_url="https://www.beercitymusichall.com",
        ),
        PrekindleAdapter(
            config, fetcher,
            name="resonanthead",
            url="https://www.prekindle.com/events/resonant-head",
            venue_name="Resonant Head",
            venue_url="https://www.resonanthead.com",
        ),
    ]


def adapter_names(config: Optional[PipelineConfig] = None) -> List[str]:
    return [a.name for a in build_adapters(config or PipelineConfig())]


def get_adapter(name: str, config: PipelineConfig, fetcher: Optional[Fetcher] = None) -> Adapter:
    """Look up one adapter by name; KeyError lists the known names."""
    adapters: Dict[str, Adapter] = {a.name: a for a in build_adapters(config, fetcher)}
    try:
        return adapters[name]
    except KeyError:
        raise KeyError(f"Unknown adapter {name!r}; known: {', '.join(adapters)}") from None
