# -*- coding: utf-8 -*-
"""
Terminal report of zone signals.
"""

from typing import List, Optional

from rich import box
from rich.table import Table
from rich.text import Text

from scanner.market.analysis import SymbolAnalysis
from scanner.signals.indicators import momentum_snapshot
from scanner.signals.zone_signal import SignalLabel


def _color_text(value: Optional[str]) -> Text:
    if value == 'green':
        return Text("GREEN", style="bold green")
    if value == 'red':
        return Text("RED", style="bold red")
    return Text("N/A", style="dim")


def build_signals_table(analyses: List[SymbolAnalysis],
                        label: SignalLabel = SignalLabel.MAX_ZONE_PUMP,
                        last_updated: Optional[str] = None) -> Table:
    """Build a rich table listing the given (already filtered) analyses."""
    caption = f"Last updated: {last_updated}" if last_updated else None
    table = Table(title=f"{label.value} Signals ({len(analyses)})", caption=caption,
                  box=box.ROUNDED, header_style="bold magenta")
    table.add_column("Symbol", style="bold")
    table.add_column("Current Price", justify="right")
    table.add_column("24h Change (%)", justify="right")
    table.add_column("RSI Pump Strength", justify="right")
    table.add_column("Prev Session Volume", justify="center")

    for analysis in analyses:
        snapshot = momentum_snapshot(analysis.rsi)
        price = analysis.last_price
        change = analysis.price_change_percent
        table.add_row(
            analysis.symbol,
            f"${price:.2f}" if price is not None else "N/A",
            Text(f"{change:.2f}%", style="green" if change > 0 else "red"),
            f"{snapshot.pump_strength:.2f}" if snapshot else "N/A",
            _color_text(analysis.highest_volume_color_prev),
        )

    return table
