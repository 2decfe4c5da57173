# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Server-to-client change notifications."""

from backoffice.realtime.bus import ChangeEvent, ChangeNotificationBus, change_bus
from backoffice.realtime.topics import ChangeTopic

__all__ = ["ChangeEvent", "ChangeNotificationBus", "ChangeTopic", "change_bus"]
