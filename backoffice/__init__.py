# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Retail back-office: employee access control and live cache coherence."""

__version__ = "0.1.0"
