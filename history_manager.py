"""
History Manager for Calcpad
Keeps the calculations of the running session in memory
"""
from collections import deque
from datetime import datetime

import config


class HistoryManager:
    def __init__(self, max_items=config.MAX_HISTORY_ITEMS):
        self.calculations = deque(maxlen=max_items)

    def add_calculation(self, expression, result):
        """Add a calculation to history"""
        self.calculations.append((expression, result, datetime.now().strftime("%Y-%m-%d %H:%M:%S")))

    def get_calculation_history(self, limit=50):
        """Get calculation history, newest first"""
        history = list(reversed(self.calculations))
        return history[:limit]

    def clear_calculation_history(self):
        """Clear all calculation history"""
        self.calculations.clear()

    def search_calculations(self, keyword):
        """Search calculations by expression or result text"""
        return [
            calc for calc in self.get_calculation_history(limit=len(self.calculations))
            if keyword in calc[0] or keyword in calc[1]
        ]

    def format_calculation_history(self):
        """Format calculation history for display"""
        formatted = []
        for expr, result, timestamp in self.get_calculation_history():
            formatted.append(f"{timestamp}: {expr} = {result}")
        return formatted
