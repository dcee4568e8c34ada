from .list_view import ListView
from .widget import PALETTE, FileWidgetSink, SummaryWidget, WidgetContent, WidgetRow

__all__ = ["ListView", "SummaryWidget", "WidgetContent", "WidgetRow", "FileWidgetSink", "PALETTE"]
