"""Bank code derivation from a payment address handle."""

# Order matters: the first handle fragment contained in the address wins
HANDLE_TO_BANK: dict[str, str] = {
    "oksbi": "sbi",
    "okaxis": "axis",
    "okicici": "icici",
    "okhdfcbank": "hdfc",
    "ybl": "paytm",
    "paytm": "paytm",
    "ibl": "icici",
    "sbi": "sbi",
    "axisbank": "axis",
    "axis": "axis",
    "hdfcbank": "hdfc",
    "icici": "icici",
    "upi": "generic",
    "gpay": "google",
    "phonepe": "phonepe",
    "apl": "amazon",
}


def extract_bank(address: str | None) -> str:
    """Map ``name@handle`` to a bank code.

    Returns ``"unknown"`` for an empty address and ``"other"`` when the
    handle matches no known bank.
    """
    if not address:
        return "unknown"

    _, _, handle = address.partition("@")
    handle = handle.lower()
    if not handle:
        return "other"

    for fragment, bank in HANDLE_TO_BANK.items():
        if fragment in handle:
            return bank
    return "other"
