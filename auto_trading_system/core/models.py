"""Domain value types shared by the trading pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..database.models import PositionRecord, TransactionRecord
from ..errors import ConfigurationError
from ..utils.timing import is_supported_interval


@dataclass(frozen=True, slots=True)
class Token:
    address: str
    symbol: str
    decimals: int
    logo_uri: Optional[str] = None
    network: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Token':
        try:
            return cls(
                address=str(data['address']),
                symbol=str(data['symbol']),
                decimals=int(data['decimals']),
                logo_uri=data.get('logoURI', data.get('logo_uri')),
                network=data.get('network'),
            )
        except (KeyError, TypeError, ValueError) as error:
            raise ConfigurationError(f'Invalid token definition {data!r}: {error}') from error

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'address': self.address,
            'symbol': self.symbol,
            'decimals': self.decimals,
        }
        if self.logo_uri is not None:
            payload['logoURI'] = self.logo_uri
        if self.network is not None:
            payload['network'] = self.network
        return payload


@dataclass(slots=True)
class MarketMetadata:
    """Live market figures used by pre-trade validation."""

    liquidity_usd: float = 0.0
    volume_24h_usd: float = 0.0
    trust_score: Optional[float] = None
    price_usd: Optional[float] = None


@dataclass(frozen=True, slots=True)
class PricedToken(Token):
    """A token with the price snapshot taken at evaluation time."""

    price: float = 0.0
    market: Optional[MarketMetadata] = None

    @classmethod
    def from_token(
        cls,
        token: Token,
        price: float,
        market: Optional[MarketMetadata] = None,
    ) -> 'PricedToken':
        return cls(
            address=token.address,
            symbol=token.symbol,
            decimals=token.decimals,
            logo_uri=token.logo_uri,
            network=token.network,
            price=price,
            market=market,
        )


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Directional pair: ``from_token`` is spent to acquire ``to_token`` on open."""

    from_token: Token
    to_token: Token

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TokenPair':
        if 'from' not in data or 'to' not in data:
            raise ConfigurationError(f'Token pair requires "from" and "to": {data!r}')
        return cls(from_token=Token.from_dict(data['from']), to_token=Token.from_dict(data['to']))

    @property
    def key(self) -> Tuple[str, str]:
        """``(base, quote)`` key used to match open positions."""
        return (self.to_token.address, self.from_token.address)

    @property
    def label(self) -> str:
        return f'{self.from_token.symbol}/{self.to_token.symbol}'


@dataclass(slots=True)
class RsiConfig:
    length: int = 14
    over_bought: float = 70.0
    over_sold: float = 30.0

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ConfigurationError('RSI length must be positive')
        if not 0 < self.over_sold < self.over_bought < 100:
            raise ConfigurationError(
                f'RSI thresholds must satisfy 0 < overSold < overBought < 100 '
                f'(got {self.over_sold}/{self.over_bought})'
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RsiConfig':
        return cls(
            length=int(data.get('length', 14)),
            over_bought=float(data.get('overBought', 70)),
            over_sold=float(data.get('overSold', 30)),
        )


@dataclass(slots=True)
class TradingStrategyConfig:
    """Strategy configuration as stored on the assignment."""

    title: str
    type: str
    token_pairs: List[TokenPair]
    time_interval: str
    max_portfolio_allocation: float
    rsi_config: RsiConfig = field(default_factory=RsiConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TradingStrategyConfig':
        pairs = data.get('tokenPairs')
        if not isinstance(pairs, list):
            raise ConfigurationError('Strategy config requires a "tokenPairs" list')
        allocation = float(data.get('maxPortfolioAllocation', 0))
        if not 0 <= allocation <= 100:
            raise ConfigurationError(f'maxPortfolioAllocation must be within 0-100 (got {allocation})')
        interval = str(data.get('timeInterval', '15m'))
        if not is_supported_interval(interval):
            raise ConfigurationError(f'Unsupported timeInterval: {interval}')
        return cls(
            title=str(data.get('title', '')),
            type=str(data.get('type', '')),
            token_pairs=[TokenPair.from_dict(pair) for pair in pairs],
            time_interval=interval,
            max_portfolio_allocation=allocation,
            rsi_config=RsiConfig.from_dict(data.get('rsiConfig') or {}),
        )


@dataclass(slots=True)
class PricePoint:
    unix_time: int
    value: float


@dataclass(slots=True)
class TokenPriceHistory:
    token: Token
    prices: List[PricePoint] = field(default_factory=list)
    market: Optional[MarketMetadata] = None

    @property
    def values(self) -> List[float]:
        return [point.value for point in self.prices]

    @property
    def latest_price(self) -> Optional[float]:
        return self.prices[-1].value if self.prices else None


@dataclass(slots=True)
class WalletPortfolioItem:
    address: str
    symbol: str
    decimals: int
    ui_amount: float
    price_usd: float = 0.0
    value_usd: float = 0.0
    balance: Optional[str] = None
    name: Optional[str] = None
    logo_uri: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WalletPortfolioItem':
        return cls(
            address=str(data['address']),
            symbol=str(data.get('symbol') or ''),
            decimals=int(data.get('decimals') or 0),
            ui_amount=float(data.get('uiAmount') or 0.0),
            price_usd=float(data.get('priceUsd') or 0.0),
            value_usd=float(data.get('valueUsd') or 0.0),
            balance=None if data.get('balance') is None else str(data['balance']),
            name=data.get('name'),
            logo_uri=data.get('logoURI'),
        )


@dataclass(slots=True)
class WalletPortfolio:
    wallet: str
    items: List[WalletPortfolioItem] = field(default_factory=list)
    total_usd: float = 0.0


@dataclass(slots=True)
class PortfolioState:
    """Snapshot of open positions and wallet balances for one cycle."""

    open_positions: List[PositionRecord] = field(default_factory=list)
    wallet_portfolio_items: List[WalletPortfolioItem] = field(default_factory=list)
    total_value: float = 0.0
    _positions_by_pair: Dict[Tuple[str, str], PositionRecord] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        for position in self.open_positions:
            self._positions_by_pair.setdefault(position.pair_key, position)

    def open_position_for(self, pair: TokenPair) -> Optional[PositionRecord]:
        return self._positions_by_pair.get(pair.key)

    def wallet_item_for(self, token: Token) -> Optional[WalletPortfolioItem]:
        for item in self.wallet_portfolio_items:
            if item.address == token.address:
                return item
        return None


class ExecutionState(str, enum.Enum):
    PENDING = 'PENDING'
    VALIDATING = 'VALIDATING'
    EXECUTING = 'EXECUTING'
    RECORDING = 'RECORDING'
    SUCCEEDED = 'SUCCEEDED'
    FAILED = 'FAILED'


@dataclass(slots=True)
class TradeDecision:
    should_open: bool
    should_close: bool
    amount: float
    description: str
    token_pair: Optional[TokenPair] = None
    strategy_assignment_id: Optional[str] = None
    position: Optional[PositionRecord] = None

    def __post_init__(self) -> None:
        if self.should_open and self.should_close:
            raise ValueError('A decision cannot both open and close a position')

    @property
    def is_actionable(self) -> bool:
        return self.should_open or self.should_close

    def swap_tokens(self) -> Tuple[Token, Token]:
        """Return ``(source, destination)`` of the swap this decision makes."""

        if self.token_pair is None:
            raise ValueError('Decision has no token pair')
        if self.should_close:
            return self.token_pair.to_token, self.token_pair.from_token
        return self.token_pair.from_token, self.token_pair.to_token


@dataclass(slots=True)
class SwapDetails:
    """Amounts actually exchanged, in UI units."""

    input_amount: float
    output_amount: float
    input_token: Optional[str] = None
    output_token: Optional[str] = None
    block_time: Optional[int] = None


@dataclass(slots=True)
class TradeResult:
    decision: TradeDecision
    success: bool
    state: ExecutionState
    transaction: Optional[TransactionRecord] = None
    position: Optional[PositionRecord] = None
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    failed_state: Optional[ExecutionState] = None


__all__ = [
    'Token',
    'MarketMetadata',
    'PricedToken',
    'TokenPair',
    'RsiConfig',
    'TradingStrategyConfig',
    'PricePoint',
    'TokenPriceHistory',
    'WalletPortfolioItem',
    'WalletPortfolio',
    'PortfolioState',
    'ExecutionState',
    'TradeDecision',
    'SwapDetails',
    'TradeResult',
]
