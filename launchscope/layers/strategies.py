"""
Strategy cascade helpers.

A field is resolved by an ordered list of independent strategies, each a plain
function of the page context that returns a value or None. first_success runs
them in order and stops at the first non-empty result; append_unique merges
later results into an earlier list without duplicates.
"""
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from launchscope.utils.logger import StageLogger

C = TypeVar("C")
T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[C, T]):
    """One named extraction attempt."""
    name: str
    func: Callable[[C], Optional[T]]

    def run(self, context: C, logger: Optional[StageLogger] = None) -> Optional[T]:
        """Run the strategy; a raising strategy counts as producing nothing."""
        try:
            return self.func(context)
        except Exception as e:
            if logger:
                logger.log_error(
                    f"Strategy {self.name} failed: {str(e)}",
                    error_type="strategy_error",
                    strategy=self.name,
                )
            return None


def _is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, str)) and len(value) == 0:
        return True
    return False


def first_success(
    field_name: str,
    strategies: Sequence[Strategy[C, T]],
    context: C,
    logger: Optional[StageLogger] = None,
) -> Optional[T]:
    """Return the first non-empty strategy result, or None."""
    for index, strategy in enumerate(strategies):
        result = strategy.run(context, logger)
        if not _is_empty(result):
            if logger:
                logger.log_decision(
                    decision=f"{field_name}_resolved",
                    reason=f"Strategy {strategy.name} produced data",
                    strategy=strategy.name,
                    priority=index,
                )
            return result

        if logger and index + 1 < len(strategies):
            logger.log_fallback(
                from_source=strategy.name,
                to_source=strategies[index + 1].name,
                reason=f"No {field_name} found",
            )

    return None


def append_unique(target: List[T], values: Optional[Sequence[T]], key: Callable[[T], object] = lambda v: v) -> List[T]:
    """Append values whose key is not already present (exact equality). Mutates and returns target."""
    if not values:
        return target
    seen = {key(v) for v in target}
    for value in values:
        k = key(value)
        if k in seen:
            continue
        seen.add(k)
        target.append(value)
    return target
