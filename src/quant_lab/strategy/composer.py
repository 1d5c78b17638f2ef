"""Compose a three-phase market story from a strategy description.

Every story is Context (the setup), Action (the triggering move) and
Resolution (the aftermath). The phases are picked from keyword tests on the
lower-cased text; nothing here is random.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from quant_lab.simulator.models import MarketState, Scene

SHORT_KEYWORDS = ("short", "sell", "bear")
BREAKOUT_KEYWORDS = ("break", "spike", "cross", "above", "below")
MEAN_REVERSION_KEYWORDS = ("pullback", "dip", "bounce", "rsi", "band")
VOLATILE_KEYWORDS = ("volatile", "chop")


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class StoryIntent:
    is_short: bool
    is_breakout: bool
    is_mean_reversion: bool
    is_volatile: bool

    @classmethod
    def from_text(cls, text: str) -> "StoryIntent":
        lowered = text.lower()
        return cls(
            is_short=_mentions(lowered, SHORT_KEYWORDS),
            is_breakout=_mentions(lowered, BREAKOUT_KEYWORDS),
            is_mean_reversion=_mentions(lowered, MEAN_REVERSION_KEYWORDS),
            is_volatile=_mentions(lowered, VOLATILE_KEYWORDS),
        )

    @property
    def trend_dir(self) -> float:
        return -0.5 if self.is_short else 0.5


def _context_scene(intent: StoryIntent) -> Scene:
    trend = intent.trend_dir
    if intent.is_breakout:
        # compression before the break
        return Scene(35, MarketState(trend=trend * 0.2, volatility=0.3, momentum=0.0, volume=0.5))
    if intent.is_mean_reversion:
        # a strong trend to revert from
        return Scene(35, MarketState(trend=trend, volatility=0.8, momentum=0.2, volume=1.0))
    return Scene(40, MarketState(trend=trend * 0.5, volatility=0.6, momentum=0.0, volume=1.0))


def _action_scene(intent: StoryIntent) -> Scene:
    trend = intent.trend_dir
    if intent.is_breakout:
        return Scene(15, MarketState(trend=trend * 2.0, volatility=3.5, momentum=1.5, volume=3.0))
    if intent.is_mean_reversion:
        # counter-trend dip or spike
        return Scene(15, MarketState(trend=trend * -1.5, volatility=1.2, momentum=0.5, volume=1.2))
    if intent.is_volatile:
        return Scene(20, MarketState(trend=0.0, volatility=4.0, momentum=0.0, volume=2.0))
    return Scene(20, MarketState(trend=trend * 1.5, volatility=1.5, momentum=0.5, volume=1.5))


def _resolution_scene(intent: StoryIntent) -> Scene:
    trend = intent.trend_dir
    if intent.is_mean_reversion:
        return Scene(35, MarketState(trend=trend, volatility=0.9, momentum=0.3, volume=1.5))
    return Scene(35, MarketState(trend=trend * 0.8, volatility=1.5, momentum=0.2, volume=1.0))


def compose_market_story(text: str) -> list[Scene]:
    intent = StoryIntent.from_text(text)
    story = [_context_scene(intent), _action_scene(intent), _resolution_scene(intent)]
    logger.debug("Composed story for {!r}: {}", text, intent)
    return story
