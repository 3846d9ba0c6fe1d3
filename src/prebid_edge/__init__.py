"""
Prebid Edge - OpenRTB bid-request translation at the edge.

Accepts generic OpenRTB auctions, rewrites them for a single downstream
exchange, relays them, and normalizes the exchange's bids.
"""

from .adapters import Bidder, Builder, get_builder
from .config import ServerSettings, SmartAdServerConfig
from .errors import AdapterError, ConfigError
from .openrtb import BidRequest, BidResponse

__version__ = '1.0.0'

__all__ = [
    'Bidder',
    'Builder',
    'get_builder',
    'ServerSettings',
    'SmartAdServerConfig',
    'AdapterError',
    'ConfigError',
    'BidRequest',
    'BidResponse',
]
