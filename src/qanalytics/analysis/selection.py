"""Position selection: which positions an analysis pass includes.

Rules, with final_index the last bar of the analysis window:
- A closed position is included iff its entry is at or before final_index
- Under IGNORE, positions still open as of final_index are excluded
- Under MARK_TO_MARKET the current open position is included iff its entry
  is at or before final_index; a live record contributes each open lot as an
  independent entry-only position
- REALIZED mode always behaves as IGNORE
"""

from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling, effective_open_position_handling
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.live import LiveTradingRecord
from qanalytics.trading.position import Position


def _entered_by(position: Position, final_index: int) -> bool:
    return position.entry is not None and position.entry.index <= final_index


def select_positions(
    record: ITradingRecord,
    final_index: int,
    open_position_handling: OpenPositionHandling,
    equity_curve_mode: EquityCurveMode = EquityCurveMode.MARK_TO_MARKET,
) -> list[Position]:
    """
    Select the positions an analysis pass folds.

    Args:
        record: Trading record to select from
        final_index: Last bar index of the analysis window
        open_position_handling: Requested handling of open positions
        equity_curve_mode: REALIZED forces IGNORE

    Returns:
        Selected positions, closed ones first in record order

    Raises:
        ValueError: If record or a policy is None, or final_index is negative
    """
    if record is None:
        raise ValueError("record must not be None")
    if open_position_handling is None or equity_curve_mode is None:
        raise ValueError("open_position_handling and equity_curve_mode must not be None")
    if final_index < 0:
        raise ValueError(f"final_index cannot be negative, got {final_index}")

    handling = effective_open_position_handling(equity_curve_mode, open_position_handling)
    ignore_open = handling is OpenPositionHandling.IGNORE

    selected: list[Position] = []
    for position in record.positions:
        if not _entered_by(position, final_index):
            continue
        if ignore_open:
            assert position.exit is not None
            if position.exit.index > final_index:
                continue
        selected.append(position)

    if ignore_open:
        return selected

    if isinstance(record, LiveTradingRecord):
        selected.extend(p for p in record.open_lot_positions() if _entered_by(p, final_index))
    else:
        current = record.current_position
        if current.is_opened and _entered_by(current, final_index):
            selected.append(current)
    return selected
