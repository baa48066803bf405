def mask_account_number(account_number: str) -> str:
    if not account_number or len(account_number) < 4:
        return "XXXX"
    return "XXXX" + account_number[-4:]


def mask_pan_number(pan_number: str) -> str:
    if not pan_number or len(pan_number) < 5:
        return "XXXXX"
    return pan_number[:3] + "XXXX" + pan_number[-1]


def mask_upi_id(upi_id: str) -> str:
    if not upi_id:
        return ""
    parts = upi_id.split("@")
    if len(parts) != 2:
        return "XXXX@XXXX"
    username, domain = parts
    if len(username) <= 3:
        return "XXXX@" + domain
    return username[:3] + "XXXX@" + domain


def mask_bank_details(details: dict, reveal: bool = False) -> dict:
    """Return a display copy of bank details; only admins get ``reveal``."""
    masked = dict(details)
    if reveal:
        return masked
    masked["account_number"] = mask_account_number(details.get("account_number") or "")
    if details.get("pan_number"):
        masked["pan_number"] = mask_pan_number(details["pan_number"])
    if details.get("upi_id"):
        masked["upi_id"] = mask_upi_id(details["upi_id"])
    return masked
