"""External service integrations exposed to the rest of the system."""

from .birdeye_service import BirdeyeService
from .swap_service import SwapClient, extract_swap_details, paper_swap_details

__all__ = ['BirdeyeService', 'SwapClient', 'extract_swap_details', 'paper_swap_details']
