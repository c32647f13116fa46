from __future__ import annotations

import copy
from typing import Any

PKGEN_PREFIX = "pkgen"

INITIAL_PKGEN_DB: dict[str, Any] = {
    "version": 1,
    "users": {},
    "admin": {
        "paymentRequests": [],
        "treasury": {
            "evm": "0xb53D334BD9B3E635f5A461f26F660dC0944e98B1",
            "btc": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
            "ltc": "LQtpSB2b8b9j3cZ7n3v6g8e5h6y4d2f1",
        },
        "pricing": {
            "Free": {"tier": "Free", "maxSpeed": 10, "maxWorkers": 1, "priceEth": 0, "priceUsd": 0},
            "Pro": {"tier": "Pro", "maxSpeed": 1000, "maxWorkers": 4, "priceEth": 0.05, "priceUsd": 150},
            "Premium": {"tier": "Premium", "maxSpeed": 100000, "maxWorkers": 16, "priceEth": 0.15, "priceUsd": 450},
        },
    },
}

GENERIC_DEFAULT_DB: dict[str, Any] = {
    "version": 1,
    "note": "Initialized new app storage",
    "data": {},
}


def initial_payload_for_app(app_id: str) -> dict[str, Any]:
    """Default payload for a new appId. Always a fresh copy."""
    if app_id.startswith(PKGEN_PREFIX):
        return copy.deepcopy(INITIAL_PKGEN_DB)
    return copy.deepcopy(GENERIC_DEFAULT_DB)
