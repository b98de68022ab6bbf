# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Transport backends for the fetcher.
"""

from .httpx import HTTPXHttpRPCAsyncBackend

__all__ = [
    "HTTPXHttpRPCAsyncBackend",
]
