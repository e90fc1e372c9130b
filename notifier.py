# file: notifier.py

import logging  # logging

import httpx  # HTTP

import config  # settings

logger = logging.getLogger("tapgas.notifier")


def mail_configured() -> bool:
    return bool(config.MAIL_API_URL)


async def send_login_code(email: str, code: str) -> bool:  # True when handed to the mail API
    if not mail_configured():
        logger.info("mail not configured; login code for %s: %s", email, code)
        return False
    headers = {"Content-Type": "application/json"}
    if config.MAIL_API_KEY:
        headers["Authorization"] = f"Bearer {config.MAIL_API_KEY}"
    payload = {
        "from": config.MAIL_FROM,
        "to": [email],
        "subject": "Your TapGas login code",
        "text": f"Your login code is {code}. It expires in {config.LOGIN_CODE_TTL_MINUTES} minutes.",
    }
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(config.MAIL_API_URL, headers=headers, json=payload)
    except httpx.HTTPError as e:
        logger.error("login code mail to %s failed: %s", email, e)
        return False
    if resp.status_code >= 300:
        logger.error("login code mail to %s failed HTTP_%s body=%s", email, resp.status_code, resp.text)
        return False
    return True
